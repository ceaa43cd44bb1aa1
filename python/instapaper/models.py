"""Data models for Instapaper API responses."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Bookmark:
    """A saved URL in the user's reading list."""
    url: str
    title: str = ""
    description: str = ""
    bookmark_id: int = 0
    hash: str = ""
    progress: float = 0.0
    progress_timestamp: float = 0.0
    time: float = 0.0
    starred: str = "0"
    private_source: str = ""
    type: str = "bookmark"

    @property
    def is_starred(self) -> bool:
        return self.starred == "1"

    @classmethod
    def from_dict(cls, data: dict) -> "Bookmark":
        """Build a Bookmark from an API object, defaulting missing keys."""
        return cls(
            url=data.get("url", ""),
            title=data.get("title") or "",
            description=data.get("description") or "",
            bookmark_id=int(data.get("bookmark_id", 0)),
            hash=data.get("hash", ""),
            progress=float(data.get("progress", 0) or 0),
            progress_timestamp=float(data.get("progress_timestamp", 0) or 0),
            time=float(data.get("time", 0) or 0),
            starred=str(data.get("starred", "0")),
            private_source=data.get("private_source", ""),
            type=data.get("type", "bookmark"),
        )


@dataclass
class User:
    """Bare-bones information about the authenticated user."""
    user_id: int
    username: str
    subscription_is_active: str = "0"
    type: str = "user"

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            user_id=int(data.get("user_id", 0)),
            username=data.get("username", ""),
            subscription_is_active=str(data.get("subscription_is_active", "0")),
            type=data.get("type", "user"),
        )


@dataclass
class Highlight:
    """A highlighted passage of a bookmarked article."""
    highlight_id: int
    bookmark_id: int
    text: str
    note: Optional[str] = None
    time: int = 0
    position: int = 0
    type: str = "highlight"

    @classmethod
    def from_dict(cls, data: dict) -> "Highlight":
        return cls(
            highlight_id=int(data.get("highlight_id", 0)),
            bookmark_id=int(data.get("bookmark_id", 0)),
            text=data.get("text", ""),
            note=data.get("note"),
            time=int(data.get("time", 0) or 0),
            position=int(data.get("position", 0) or 0),
            type=data.get("type", "highlight"),
        )


@dataclass
class BookmarkList:
    """Everything returned by a bookmarks/list call."""
    user: Optional[User] = None
    bookmarks: List[Bookmark] = field(default_factory=list)
    highlights: List[Highlight] = field(default_factory=list)
    delete_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_response(cls, data) -> "BookmarkList":
        """
        Parse a bookmarks/list payload.

        API 1.1 answers with an object keyed by ``user``, ``bookmarks``,
        ``highlights`` and ``delete_ids``. API 1 answers with a flat array
        whose items are told apart by their ``type`` field. Both are accepted.

        Args:
            data: Decoded JSON body

        Returns:
            BookmarkList with bookmarks in server order
        """
        if isinstance(data, dict):
            user = data.get("user")
            return cls(
                user=User.from_dict(user) if user else None,
                bookmarks=[Bookmark.from_dict(b) for b in data.get("bookmarks", [])],
                highlights=[Highlight.from_dict(h) for h in data.get("highlights", [])],
                delete_ids=[int(i) for i in data.get("delete_ids", [])],
            )

        result = cls()
        for item in data:
            kind = item.get("type")
            if kind == "user":
                result.user = User.from_dict(item)
            elif kind == "bookmark":
                result.bookmarks.append(Bookmark.from_dict(item))
            elif kind == "highlight":
                result.highlights.append(Highlight.from_dict(item))
        return result
