"""Category-filtered debug output for the CHIP-8 interpreter.

Set ``CHIP8_DEBUG`` to a comma-separated list of categories (``cpu``,
``input``, ``audio``, ``perf``, ``trace``, ``app``) or to ``all``. The
variable is read once, on first use.
"""

from __future__ import annotations

import os
from typing import FrozenSet, Optional

ENV_VAR = "CHIP8_DEBUG"
ALL = "all"

_enabled: Optional[FrozenSet[str]] = None


def parse_categories(value: str) -> FrozenSet[str]:
    """Split a ``CHIP8_DEBUG`` value into lower-case category names."""

    return frozenset(part.strip().lower() for part in value.split(",") if part.strip())


def enabled_categories() -> FrozenSet[str]:
    global _enabled
    if _enabled is None:
        _enabled = parse_categories(os.environ.get(ENV_VAR, ""))
    return _enabled


def reset_categories() -> None:
    """Forget the cached categories so ``CHIP8_DEBUG`` is read again."""

    global _enabled
    _enabled = None


def debug_enabled(category: str | None = None) -> bool:
    categories = enabled_categories()
    if category is None or ALL in categories:
        return bool(categories)
    return category.lower() in categories


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")
