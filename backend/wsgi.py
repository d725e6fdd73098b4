# backend/wsgi.py
from cosmo_admin import create_app

app = create_app()
