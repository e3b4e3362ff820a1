"""Request controllers for the Ki application."""

from . import account, home
