"""Tests for :mod:`ki.services`."""
