from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

Visibility = Literal["public", "private"]

FILE_URL_SALT = "themekit.files"

logger = logging.getLogger(__name__)


class FileResolver:
    """Turn stored upload references into time-limited, signed download URLs."""

    def __init__(self, *, uploads_root: Path | str, app_url: str, secret_key: str) -> None:
        self._uploads_root = Path(uploads_root)
        self._app_url = app_url.rstrip("/")
        self._serializer = URLSafeTimedSerializer(secret_key, salt=FILE_URL_SALT)

    def path_for(self, reference: str) -> Path | None:
        candidate = (self._uploads_root / reference.lstrip("/")).resolve()
        root = self._uploads_root.resolve()
        if root not in candidate.parents:
            return None
        return candidate

    def resolve_url(
        self,
        reference: str,
        visibility: Visibility = "public",
        ttl_minutes: int = 60,
    ) -> str | None:
        path = self.path_for(reference) if reference else None
        if path is None or not path.is_file():
            logger.info(
                "files.reference_missing",
                extra={"event": "files.reference_missing", "reference": reference},
            )
            return None
        token = self._serializer.dumps(
            {"ref": reference, "vis": visibility, "ttl": int(ttl_minutes) * 60}
        )
        return f"{self._app_url}/files/{token}"

    def load_reference(self, token: str) -> str | None:
        try:
            payload = self._serializer.loads(token)
            reference = str(payload["ref"])
            # The TTL travels inside the signed payload.
            self._serializer.loads(token, max_age=int(payload["ttl"]))
        except SignatureExpired:
            return None
        except BadSignature:
            logger.warning("files.bad_signature", extra={"event": "files.bad_signature"})
            return None
        except (KeyError, TypeError, ValueError):
            return None
        return reference
