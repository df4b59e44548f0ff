from marshmallow import fields, validates, validates_schema, ValidationError
from transit_reports.extensions import ma


class RegisterSchema(ma.Schema):
    name = fields.String(required=True)
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @validates("name")
    def validate_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Name cannot be empty.")

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 6:
            raise ValidationError("Password must be at least 6 characters long.")


class LoginSchema(ma.Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)


class ChangePasswordSchema(ma.Schema):
    current_password = fields.String(required=True, load_only=True, data_key="currentPassword")
    new_password = fields.String(required=True, load_only=True, data_key="newPassword")
    confirm_password = fields.String(required=False, load_only=True, data_key="confirmPassword")

    @validates("new_password")
    def validate_new_password(self, value, **kwargs):
        if len(value) < 6:
            raise ValidationError("Password must be at least 6 characters long.")

    @validates_schema
    def validate_confirmation(self, data, **kwargs):
        if "confirm_password" in data and data["new_password"] != data["confirm_password"]:
            raise ValidationError("New passwords do not match", field_name="confirmPassword")
