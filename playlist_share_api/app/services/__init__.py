"""
Service layer.

Services receive the connection they operate on from the caller and
never keep one of their own.  ``entity_store`` and ``visibility`` are
plain modules; the rest expose classes of async classmethods used by
the API handlers.
"""
