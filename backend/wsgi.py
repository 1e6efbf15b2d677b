# backend/wsgi.py
from navguard import create_app

app = create_app()
