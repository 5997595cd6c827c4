"""
Application package initializer.

The package is organised in layers: ``core`` (configuration, database
access, errors, security), ``schemas`` (pydantic request and response
bodies), ``services`` (the playlist engine: entity store, visibility
rules, view composition, ranking and mutations) and ``api`` (thin
versioned routers).
"""

from .main import app  # noqa: F401
