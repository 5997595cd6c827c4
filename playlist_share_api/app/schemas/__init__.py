"""
Pydantic schema definitions for API payloads.

Schemas are separated from the storage records in
``services.entity_store`` to decouple the API representation from
persistence.
"""
