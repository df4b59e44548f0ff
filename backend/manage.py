"""
Convenience entry point for the Flask CLI:
    python manage.py run
    python manage.py shell
    python manage.py create-user --role official
    flask db upgrade (with FLASK_APP=wsgi.py)
"""

from flask.cli import main

if __name__ == "__main__":
    main()
