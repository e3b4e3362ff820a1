"""Tests for :mod:`ki.controllers`."""
