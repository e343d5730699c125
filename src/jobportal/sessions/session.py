"""Per-request session object."""

from __future__ import annotations

import secrets
from collections.abc import Iterator, MutableMapping
from typing import Any


def new_session_id() -> str:
    return secrets.token_urlsafe(24)


class Session(MutableMapping):
    """
    Dictionary-like session state with change tracking.

    The session stage only writes a session to its store when it was
    modified or destroyed during the request, so reads never persist
    anything on their own.

    Attributes:
        id: Session identifier carried (signed) in the session cookie
        is_new: True when no stored record backed this session
        modified: True once any key was set or deleted
        destroyed: True after ``destroy()``
        previous_id: Stored id replaced by ``regenerate()``, if any
    """

    def __init__(self, sid: str, data: dict[str, Any] | None = None, *, is_new: bool) -> None:
        self.id = sid
        self.is_new = is_new
        self.modified = False
        self.destroyed = False
        self.previous_id: str | None = None
        self._data: dict[str, Any] = dict(data or {})

    @classmethod
    def create(cls) -> "Session":
        return cls(new_session_id(), is_new=True)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.modified = True

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self.modified = True

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def regenerate(self) -> None:
        """
        Move the session to a fresh id, keeping its data.

        Called on login so an id known before authentication never becomes
        an authenticated one. The previous id is kept in ``previous_id`` for
        the session stage to delete from the store.
        """
        if not self.is_new and self.previous_id is None:
            self.previous_id = self.id
        self.id = new_session_id()
        self.modified = True

    def destroy(self) -> None:
        """Drop all data and mark the session for removal from its store."""
        self._data.clear()
        self.destroyed = True

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def __repr__(self) -> str:
        return f"<Session(id='{self.id}', is_new={self.is_new}, modified={self.modified})>"
