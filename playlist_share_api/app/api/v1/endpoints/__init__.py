"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one domain (playlists, users,
admin, initialize).  They are aggregated in ``router.py``, except the
reset hook which ``main`` mounts at the site root.
"""
