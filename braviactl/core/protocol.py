"""Request building and response decoding for the Bravia REST and IRCC APIs."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from braviactl.core.errors import ApplicationError, MalformedResponseError
from braviactl.core.model import ApiResult
from braviactl.core.normalize import normalize_flat, normalize_listing, normalize_nested

LOGGER = logging.getLogger(__name__)

API_VERSION = "1.0"

# Services that getMethodTypes can be pointed at ("ircc" returns no methods).
KNOWN_SERVICES: tuple[str, ...] = (
    "accessControl",
    "appControl",
    "audio",
    "avContent",
    "browser",
    "cec",
    "contentshare",
    "encryption",
    "guide",
    "notification",
    "recording",
    "system",
    "videoScreen",
)

SERVICE_BY_METHOD: dict[str, str] = {
    "getApplicationList": "appControl",
    "getInterfaceInformation": "system",
    "getPlayingContentInfo": "avContent",
    "getPowerSavingMode": "system",
    "getPowerStatus": "system",
    "getRemoteControllerInfo": "system",
    "getSchemeList": "avContent",
    "getSourceList": "avContent",
    "getSystemInformation": "system",
    "getSystemSupportedFunction": "system",
    "getTextUrl": "browser",
    "getVolumeInformation": "audio",
    "getWebAppStatus": "appControl",
    "getWolMode": "system",
    "setActiveApp": "appControl",
    "setAudioMute": "audio",
    "setAudioVolume": "audio",
    "setPlayContent": "avContent",
    "setPowerStatus": "system",
    "setTextForm": "appControl",
    "terminateApps": "appControl",
}

IRCC_ENVELOPE = """<?xml version="1.0"?>
<s:Envelope
    xmlns:s="http://schemas.xmlsoap.org/soap/envelope/"
    s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
    <s:Body>
        <u:X_SendIRCC xmlns:u="urn:schemas-sony-com:service:IRCC:1">
            <IRCCCode>{code}</IRCCCode>
        </u:X_SendIRCC>
    </s:Body>
</s:Envelope>"""


class DecodeShape(str, Enum):
    FLAT = "flat"
    NESTED = "nested"
    LISTING = "listing"


def resolve_service(method: str, override: str | None = None) -> str:
    if override:
        return override
    service = SERVICE_BY_METHOD.get(method)
    if service is None:
        LOGGER.debug("Service for %s not found in the service table", method)
        return ""
    return service


@dataclass(frozen=True)
class SimpleRequest:
    method: str
    service: str | None = None

    def url(self, host: str) -> str:
        return f"http://{host}/sony/{resolve_service(self.method, self.service)}"

    def body(self) -> str:
        return _json_body(self.method, [])


@dataclass(frozen=True)
class ParamsRequest:
    method: str
    params: list[Any] = field(default_factory=list)
    service: str | None = None

    def url(self, host: str) -> str:
        return f"http://{host}/sony/{resolve_service(self.method, self.service)}"

    def body(self) -> str:
        return _json_body(self.method, self.params)


@dataclass(frozen=True)
class IrccRequest:
    code: str

    def url(self, host: str) -> str:
        return f"http://{host}/sony/ircc"

    def body(self) -> str:
        return IRCC_ENVELOPE.format(code=self.code)


Request = Union[SimpleRequest, ParamsRequest, IrccRequest]


def _json_body(method: str, params: list[Any]) -> str:
    return json.dumps(
        {
            "method": method,
            "id": 1,
            "params": list(params),
            "version": API_VERSION,
        }
    )


def decode_document(method: str, text: str) -> dict[str, Any]:
    """Parse a JSON reply and raise on an embedded application error."""
    try:
        document = json.loads(text)
    except ValueError as exc:
        raise MalformedResponseError(f"{method} returned invalid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise MalformedResponseError(f"{method} returned a non-object JSON document")

    error = document.get("error")
    if error is not None:
        code: int | None = None
        message = str(error)
        if isinstance(error, list) and len(error) >= 2:
            code = error[0] if isinstance(error[0], int) else None
            message = str(error[1])
        raise ApplicationError(method, code, message)
    return document


def decode_response(method: str, text: str, shape: DecodeShape) -> ApiResult:
    document = decode_document(method, text)
    if shape is DecodeShape.FLAT:
        return normalize_flat(method, document.get("result"))
    if shape is DecodeShape.NESTED:
        return normalize_nested(method, document.get("result"))
    if shape is DecodeShape.LISTING:
        return normalize_listing(method, document.get("results"))
    raise MalformedResponseError(f"Unsupported decode shape '{shape}' for {method}")
