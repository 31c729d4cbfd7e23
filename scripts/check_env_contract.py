#!/usr/bin/env python3
"""Check that `.env.example` documents exactly the keys `themekit/settings.py` reads."""

from __future__ import annotations

import ast
import sys
from dataclasses import dataclass, field
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SETTINGS_PATH = ROOT / "themekit" / "settings.py"
ENV_EXAMPLE_PATH = ROOT / ".env.example"

SETTINGS_ENV_HELPERS = frozenset({"_env_bool", "_env_int", "_env_str", "os.getenv"})
# Consumed by scripts and the test suite rather than by Settings.
ALLOWED_ENV_EXAMPLE_EXTRAS = frozenset(
    {
        "TEST_DATABASE_URL",
        "DB_WAIT_TIMEOUT_SECONDS",
        "DB_WAIT_INTERVAL_SECONDS",
    }
)


@dataclass
class ContractReport:
    missing: list[str] = field(default_factory=list)
    unknown: list[str] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (self.missing or self.unknown or self.duplicates)


def _helper_name(node: ast.Call) -> str | None:
    func = node.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute) and isinstance(func.value, ast.Name):
        return f"{func.value.id}.{func.attr}"
    return None


def settings_env_names(source: str) -> set[str]:
    names: set[str] = set()
    for node in ast.walk(ast.parse(source)):
        if not isinstance(node, ast.Call) or _helper_name(node) not in SETTINGS_ENV_HELPERS:
            continue
        if node.args and isinstance(node.args[0], ast.Constant) and isinstance(node.args[0].value, str):
            names.add(node.args[0].value)
    return names


def env_example_names(text: str) -> tuple[set[str], set[str]]:
    seen: set[str] = set()
    duplicates: set[str] = set()
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key = line.split("=", 1)[0].strip()
        if key in seen:
            duplicates.add(key)
        seen.add(key)
    return seen, duplicates


def check_contract(settings_source: str, env_example_text: str) -> ContractReport:
    settings_names = settings_env_names(settings_source)
    env_names, duplicates = env_example_names(env_example_text)
    return ContractReport(
        missing=sorted(settings_names - env_names),
        unknown=sorted(env_names - settings_names - ALLOWED_ENV_EXAMPLE_EXTRAS),
        duplicates=sorted(duplicates),
    )


def main() -> int:
    report = check_contract(
        SETTINGS_PATH.read_text(encoding="utf-8"),
        ENV_EXAMPLE_PATH.read_text(encoding="utf-8"),
    )
    if report.ok:
        print("Environment contract check passed.")
        return 0

    print("Environment contract check failed.")
    for title, names in (
        ("Missing from .env.example", report.missing),
        ("Unknown keys in .env.example", report.unknown),
        ("Duplicate keys in .env.example", report.duplicates),
    ):
        if names:
            print(f"{title}:")
            for name in names:
                print(f"- {name}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
