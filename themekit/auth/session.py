from __future__ import annotations

from dataclasses import dataclass

from starlette.requests import HTTPConnection

from themekit.http.session_store import SessionStore

SESSION_USER_KEY = "userdata"


@dataclass(frozen=True)
class SessionUser:
    id: int
    email: str
    is_admin: bool = False


def get_session_user(connection: HTTPConnection) -> SessionUser | None:
    session = SessionStore(connection.session)
    raw_id = session.get(f"{SESSION_USER_KEY}.id")
    if raw_id is None:
        return None
    try:
        user_id = int(raw_id)
    except (TypeError, ValueError):
        clear_session_user(connection)
        return None
    return SessionUser(
        id=user_id,
        email=str(session.get(f"{SESSION_USER_KEY}.email", "")),
        is_admin=bool(session.get(f"{SESSION_USER_KEY}.is_admin", False)),
    )


def clear_session_user(connection: HTTPConnection) -> None:
    connection.session.pop(SESSION_USER_KEY, None)
