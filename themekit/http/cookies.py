from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from starlette.requests import HTTPConnection
from starlette.responses import Response

PENDING_COOKIES_STATE_KEY = "pending_cookies"
DEFAULT_COOKIE_MAX_AGE_SECONDS = 60 * 60 * 24 * 30


def normalize_cookie_path(base_path: str) -> str:
    path = base_path.strip() or "/"
    if not path.startswith("/"):
        path = f"/{path}"
    return path if path.endswith("/") else f"{path}/"


@dataclass(frozen=True)
class PendingCookie:
    name: str
    value: str
    max_age: int
    path: str = "/"
    samesite: Literal["lax", "strict", "none"] = "strict"
    secure: bool = False
    httponly: bool = True


class PendingCookies:
    """Outgoing cookies collected during a request, one entry per cookie name."""

    def __init__(self) -> None:
        self._cookies: dict[str, PendingCookie] = {}

    def schedule(self, cookie: PendingCookie) -> None:
        self._cookies[cookie.name] = cookie

    def get(self, name: str) -> PendingCookie | None:
        return self._cookies.get(name)

    def __len__(self) -> int:
        return len(self._cookies)

    def apply(self, response: Response) -> int:
        applied = 0
        for cookie in self._cookies.values():
            response.set_cookie(
                cookie.name,
                cookie.value,
                max_age=cookie.max_age,
                expires=cookie.max_age,
                path=cookie.path,
                secure=cookie.secure,
                httponly=cookie.httponly,
                samesite=cookie.samesite,
            )
            applied += 1
        self._cookies.clear()
        return applied


def pending_cookies_for(connection: HTTPConnection) -> PendingCookies:
    pending = getattr(connection.state, PENDING_COOKIES_STATE_KEY, None)
    if pending is None:
        pending = PendingCookies()
        setattr(connection.state, PENDING_COOKIES_STATE_KEY, pending)
    return pending


class RequestCookieJar:
    """Read incoming cookies and queue outgoing ones for response finalize."""

    def __init__(
        self,
        incoming: Mapping[str, str],
        pending: PendingCookies,
        *,
        path: str = "/",
        max_age: int = DEFAULT_COOKIE_MAX_AGE_SECONDS,
        secure: bool = False,
    ) -> None:
        self._incoming = incoming
        self._pending = pending
        self._path = normalize_cookie_path(path)
        self._max_age = max_age
        self._secure = secure

    def incoming(self, name: str) -> str | None:
        return self._incoming.get(name)

    def get(self, name: str) -> str | None:
        """Value the client will hold after this response: queued, else incoming."""
        queued = self._pending.get(name)
        if queued is not None:
            return queued.value
        return self._incoming.get(name)

    def queue(self, name: str, value: str) -> None:
        self._pending.schedule(
            PendingCookie(
                name=name,
                value=value,
                max_age=self._max_age,
                path=self._path,
                samesite="strict",
                secure=self._secure,
            )
        )
