"""Per-request state shared by pipeline stages and route collaborators."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.requests import Request

from jobportal.sessions.session import Session

Finalizer = Callable[[MutableHeaders], Awaitable[None]]


@dataclass(frozen=True)
class AuthContext:
    """Who is making the request, as established by the session stage."""

    user_id: int | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


@dataclass
class RequestContext:
    """
    Lightweight per-request state container mutated by pipeline stages.

    Attributes:
        request: The Starlette request being processed
        body: Parsed JSON value or form mapping (None when unparsed or empty)
        raw_body: Bytes read by the body stage; replayed to route dispatch
        cookies: Cookie name to value
        session: Session loaded or created by the session stage
        auth: Authentication context derived from the session
    """

    request: Request
    body: Any = None
    raw_body: bytes | None = None
    cookies: dict[str, str] = field(default_factory=dict)
    session: Session | None = None
    auth: AuthContext = field(default_factory=AuthContext)
    _finalizers: list[tuple[Finalizer, bool]] = field(default_factory=list, repr=False)

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.url.path

    def on_response(self, finalizer: Finalizer, *, repeat: bool = False) -> None:
        """
        Register a callback that edits response headers before they are sent.

        One-shot finalizers are consumed before they run, so one that raises
        is not retried for the error response. ``repeat=True`` finalizers run
        on every response start, the error response included.
        """
        self._finalizers.append((finalizer, repeat))

    async def finalize(self, headers: MutableHeaders) -> None:
        """Run pending finalizers in registration order."""
        for entry in list(self._finalizers):
            finalizer, repeat = entry
            if not repeat:
                self._finalizers.remove(entry)
            await finalizer(headers)
