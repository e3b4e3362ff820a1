"""Provides application for development purposes."""
from ki.factory import create_web_app
from ki.services import datastore

app = create_web_app()
with app.app_context():
    datastore.create_all()
