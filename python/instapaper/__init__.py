"""
instapaper - Client for the Instapaper public bookmarking API.

This package provides tools to:
- Exchange a username/password for OAuth1 tokens (xAuth)
- Add bookmarks and list the bookmarks of a folder
- Bulk-import bookmarks from a CSV export
"""

from .client import Client, Credentials, authenticate
from .errors import ApiError, AuthenticationError, InstapaperError
from .models import Bookmark, BookmarkList, Highlight, User

__version__ = "1.0.0"

__all__ = [
    "ApiError",
    "AuthenticationError",
    "Bookmark",
    "BookmarkList",
    "Client",
    "Credentials",
    "Highlight",
    "InstapaperError",
    "User",
    "authenticate",
]
