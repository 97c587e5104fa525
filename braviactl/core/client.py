"""Generic request execution over a transport."""

from __future__ import annotations

import logging
from typing import Any

from braviactl.core.model import ApiResult, Endpoint
from braviactl.core.protocol import (
    DecodeShape,
    IrccRequest,
    ParamsRequest,
    Request,
    SimpleRequest,
    decode_document,
    decode_response,
)
from braviactl.transports.base import DEFAULT_TIMEOUT_S, Transport

LOGGER = logging.getLogger(__name__)


class ApiClient:
    def __init__(
        self,
        endpoint: Endpoint,
        transport: Transport,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self.endpoint = endpoint
        self.transport = transport
        self.timeout_s = timeout_s

    def _post(self, request: Request) -> str:
        url = request.url(self.endpoint.host)
        body = request.body()
        LOGGER.debug("Sending: %s %s", url, body)
        return self.transport.post(url, body, psk=self.endpoint.psk, timeout_s=self.timeout_s)

    def fetch(self, request: SimpleRequest | ParamsRequest, shape: DecodeShape) -> ApiResult:
        return decode_response(request.method, self._post(request), shape)

    def execute(self, request: SimpleRequest | ParamsRequest) -> dict[str, Any]:
        """Run a REST request whose reply carries no payload of interest."""
        return decode_document(request.method, self._post(request))

    def send_ircc(self, code: str) -> None:
        # IRCC replies are not parsed; a 200 status is the only signal.
        self._post(IrccRequest(code))
