"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol

DEFAULT_TIMEOUT_S = 1.0


class Transport(Protocol):
    def post(
        self,
        url: str,
        body: str,
        *,
        psk: str,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> str:
        """POST body to url and return the response text of a 200 reply."""
