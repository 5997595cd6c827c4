"""
Cross-cutting infrastructure: settings, logging, the SQLite handle,
the error taxonomy and authentication helpers.
"""
