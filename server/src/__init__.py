"""FastAPI service for the bloglist and phonebook exercises.

This package provides REST API endpoints for blogs, persons (contacts),
users and login, backed by MongoDB.
"""

__version__ = "0.1.0"
