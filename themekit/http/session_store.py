from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

_MISSING = object()


class SessionStore:
    """Dotted-key access to the nested session mapping.

    `set("usersettings.theme", "x")` stores `{"usersettings": {"theme": "x"}}`
    so that forgetting `usersettings` drops the whole namespace. Values must
    stay JSON-serializable because the Starlette session cookie is JSON.
    """

    def __init__(self, data: MutableMapping[str, Any]) -> None:
        self._data = data

    def _walk(self, key: str) -> tuple[MutableMapping[str, Any] | None, str]:
        *parents, leaf = key.split(".")
        node: Any = self._data
        for part in parents:
            node = node.get(part) if isinstance(node, MutableMapping) else None
            if node is None:
                return None, leaf
        if not isinstance(node, MutableMapping):
            return None, leaf
        return node, leaf

    def exists(self, key: str) -> bool:
        node, leaf = self._walk(key)
        return node is not None and leaf in node

    def get(self, key: str, default: Any = None) -> Any:
        node, leaf = self._walk(key)
        if node is None:
            return default
        value = node.get(leaf, _MISSING)
        return default if value is _MISSING else value

    def set(self, key: str, value: Any) -> None:
        *parents, leaf = key.split(".")
        node: MutableMapping[str, Any] = self._data
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
            node[part] = child
            node = child
        node[leaf] = value

    def forget(self, key: str) -> None:
        node, leaf = self._walk(key)
        if node is None or leaf not in node:
            return
        del node[leaf]
