"""HTTP transport implementation using requests."""

from __future__ import annotations

import logging

import requests

from braviactl.core.errors import (
    AuthRejectedError,
    BadRequestError,
    DeviceBusyError,
    HttpStatusError,
    NotFoundError,
    UnreachableError,
)
from braviactl.transports.base import DEFAULT_TIMEOUT_S

LOGGER = logging.getLogger(__name__)

SOAP_ACTION = '"urn:schemas-sony-com:service:IRCC:1#X_SendIRCC"'

_STATUS_ERRORS: dict[int, tuple[type[HttpStatusError], str]] = {
    400: (BadRequestError, "HTTP 400 Bad Request"),
    403: (AuthRejectedError, "HTTP 403 Forbidden - the Pre-Shared Key is probably not set up correctly"),
    404: (NotFoundError, "HTTP 404 Page Not Found - the service name may be invalid"),
    500: (
        DeviceBusyError,
        "HTTP 500 Internal Server Error - probably the TV cannot satisfy the request: eg because it is turned off",
    ),
}


class HTTPTransport:
    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session

    def post(
        self,
        url: str,
        body: str,
        *,
        psk: str,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> str:
        # Both auth headers go on every request; endpoints that don't use one ignore it.
        headers = {
            "Content-Type": "text/xml; charset=UTF-8",
            "X-Auth-PSK": psk,
            "SOAPACTION": SOAP_ACTION,
        }
        poster = self._session.post if self._session is not None else requests.post
        try:
            response = poster(
                url,
                data=body.encode("utf-8"),
                headers=headers,
                timeout=timeout_s,
            )
        except requests.Timeout as exc:
            raise UnreachableError(f"Request to {url} timed out after {timeout_s}s") from exc
        except requests.RequestException as exc:
            raise UnreachableError(f"Check ip address and connection: {exc}") from exc

        if response.status_code == 200:
            LOGGER.debug("Returned TV data is: %s", response.text)
            return response.text

        error_cls, message = _STATUS_ERRORS.get(
            response.status_code,
            (HttpStatusError, f"HTTP {response.status_code} Unknown error"),
        )
        LOGGER.error("%s (%s)", message, url)
        raise error_cls(response.status_code, message)
