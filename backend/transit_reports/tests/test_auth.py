def test_register_login_and_me(client):
	reg = client.post(
		"/api/auth/register",
		json={"name": "Dana", "email": "Dana@Test.com", "password": "secret1"},
	)
	assert reg.status_code == 201
	user = reg.get_json()["data"]
	assert user["email"] == "dana@test.com"
	assert user["role"] == "user"

	dup = client.post(
		"/api/auth/register",
		json={"name": "Dana", "email": "dana@test.com", "password": "secret1"},
	)
	assert dup.status_code == 400

	login = client.post("/api/auth/login", json={"email": "dana@test.com", "password": "secret1"})
	assert login.status_code == 200
	token = login.get_json()["data"]["access_token"]

	me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
	assert me.status_code == 200
	assert me.get_json()["data"]["name"] == "Dana"


def test_login_rejects_bad_password(client, make_user):
	make_user("e_login@test.com", password="right-one")

	resp = client.post("/api/auth/login", json={"email": "e_login@test.com", "password": "wrong-one"})
	assert resp.status_code == 401
	assert resp.get_json()["success"] is False


def test_register_validates_input(client):
	resp = client.post("/api/auth/register", json={"name": "X", "email": "not-an-email", "password": "123"})
	assert resp.status_code == 400
	errors = resp.get_json()["errors"]
	assert "email" in errors
	assert "password" in errors


def test_invalid_token_is_unauthenticated(client):
	resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
	assert resp.status_code == 401
	assert resp.get_json()["payload"]["code"] == "UNAUTHENTICATED"


def test_me_for_deleted_user_is_unknown_caller(client, raw_auth_header):
	resp = client.get("/api/auth/me", headers=raw_auth_header(4242, "gone@test.com"))
	assert resp.status_code == 404
	assert resp.get_json()["payload"]["code"] == "UNKNOWN_CALLER"


def test_change_password(client, make_user, auth_header):
	u = make_user("f_pwd@test.com", password="old-pass")

	mismatch = client.post(
		"/api/auth/change-password",
		json={"currentPassword": "old-pass", "newPassword": "new-pass", "confirmPassword": "other-pass"},
		headers=auth_header(u),
	)
	assert mismatch.status_code == 400
	assert mismatch.get_json()["payload"]["code"] == "VALIDATION_ERROR"

	wrong = client.post(
		"/api/auth/change-password",
		json={"currentPassword": "nope-nope", "newPassword": "new-pass", "confirmPassword": "new-pass"},
		headers=auth_header(u),
	)
	assert wrong.status_code == 400

	ok = client.post(
		"/api/auth/change-password",
		json={"currentPassword": "old-pass", "newPassword": "new-pass", "confirmPassword": "new-pass"},
		headers=auth_header(u),
	)
	assert ok.status_code == 200

	login = client.post("/api/auth/login", json={"email": "f_pwd@test.com", "password": "new-pass"})
	assert login.status_code == 200


def test_create_user_command(app):
	runner = app.test_cli_runner()
	result = runner.invoke(
		args=[
			"create-user",
			"--name", "Olivia",
			"--email", "olivia@test.com",
			"--role", "official",
			"--password", "Passw0rd!",
		]
	)
	assert result.exit_code == 0, result.output
	assert "official" in result.output

	again = runner.invoke(
		args=[
			"create-user",
			"--name", "Olivia",
			"--email", "olivia@test.com",
			"--password", "Passw0rd!",
		]
	)
	assert again.exit_code != 0


def test_health_check_needs_no_token(client):
	resp = client.get("/api/health")
	assert resp.status_code == 200
	assert resp.get_json()["status"] == "ok"


def test_change_password_without_confirmation(client, make_user, auth_header):
	u = make_user("f_pwd_short@test.com", password="old-pass")

	resp = client.post(
		"/api/auth/change-password",
		json={"currentPassword": "old-pass", "newPassword": "fresh-pass"},
		headers=auth_header(u),
	)
	assert resp.status_code == 200

	login = client.post("/api/auth/login", json={"email": "f_pwd_short@test.com", "password": "fresh-pass"})
	assert login.status_code == 200
