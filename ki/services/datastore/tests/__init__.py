"""Tests for :mod:`ki.services.datastore`."""
