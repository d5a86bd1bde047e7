"""
Users blueprint package.

This file just exposes the Blueprint object to be imported in tasktracker.__init__.
The actual routes and logic are in routes.py.
"""

from .routes import users_bp  # noqa: F401
