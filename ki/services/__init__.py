"""Integrations with membership providers, the session cookie and the database."""
