"""HTTP routes for the Ki application."""
