"""Print a long-lived bearer token for an account (e.g. the admin user).

Usage:
    python create_token.py adminuser
"""
import sys

from playlist_share_api.app.core.security import create_access_token

account = sys.argv[1] if len(sys.argv) > 1 else "adminuser"
# 365 days, in seconds
token = create_access_token({"sub": account}, expires_delta=365 * 24 * 60 * 60)
print(token)
