"""Name to IRCC code table fetched from the television once per connection."""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable, Mapping
from typing import Any

LOGGER = logging.getLogger(__name__)

# Actual codes are case sensitive: 'AAAAAQAAAAEAAAAUAw==' is Mute, 'AAAAAQAAAAEAAAAuAw==' is WakeUp.
IR_CODE_RE = re.compile(r"^AAAAA[A-Za-z0-9]{11}Aw==$")


def looks_like_code(value: str) -> bool:
    return IR_CODE_RE.match(value) is not None


class IRCommandTable:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._codes: dict[str, str] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._codes)

    def replace(self, entries: Iterable[Mapping[str, Any]]) -> int:
        """Swap in a fresh table built from ``{"name", "value"}`` entries.

        Several names may share one code (Sleep and PowerOff, Num12 and Enter).
        """
        codes: dict[str, str] = {}
        for entry in entries:
            name = entry.get("name")
            value = entry.get("value")
            if not isinstance(name, str) or not isinstance(value, str) or not name:
                LOGGER.debug("Skipping malformed remote controller entry: %r", entry)
                continue
            codes[name.lower()] = value
        with self._lock:
            self._codes = codes
        return len(codes)

    def clear(self) -> None:
        with self._lock:
            self._codes = {}

    def lookup(self, name_or_code: str) -> tuple[str, str] | None:
        """Return ``(name, code)`` for a button name or a known code."""
        if not name_or_code:
            return None
        with self._lock:
            codes = self._codes
        code = codes.get(name_or_code.lower())
        if code is not None:
            return name_or_code.lower(), code
        if looks_like_code(name_or_code):
            for name, value in codes.items():
                if value == name_or_code:
                    return name, value
        return None

    def resolve(self, name_or_code: str) -> str | None:
        found = self.lookup(name_or_code)
        return found[1] if found else None

    def name_for(self, code: str) -> str | None:
        with self._lock:
            codes = self._codes
        for name, value in codes.items():
            if value == code:
                return name
        return None

    def items(self) -> list[tuple[str, str]]:
        with self._lock:
            return sorted(self._codes.items())
