"""HTTP transport: JSON GET requests with failure classification."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol
from urllib.parse import urlencode

import aiohttp

from lotfinder._constants import USER_AGENT
from lotfinder._redact import redact_for_log, redact_url
from lotfinder.exceptions import LotFinderTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str, *, headers: Mapping[str, str] | None = None) -> Any:
        ...


def build_query_url(base_url: str, params: Sequence[tuple[str, str]]) -> str:
    """Append *params* to *base_url*; the result is the exact URL requested."""
    if not params:
        return base_url
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode(list(params), safe='*.,')}"


def error_detail(status: int, reason: str, text: str) -> str:
    """Best human-readable description of a failed response body.

    Prefers ``error.message`` (catalog API) or ``message`` (directory API),
    falls back to the JSON document, then to the status line.
    """
    try:
        body = json.loads(text)
    except (TypeError, ValueError):
        return f"Status {status} {reason}".strip()
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("message"):
            return str(body["message"])
    return json.dumps(body)


class HttpTransport:
    """aiohttp-backed transport returning decoded JSON documents."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float = 30.0) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str, *, headers: Mapping[str, str] | None = None) -> Any:
        """GET *url* and return the decoded JSON body.

        Raises
        ------
        LotFinderTransportError
            On network failure, a non-2xx status, or a body that cannot be
            decoded as JSON text.
            ``url`` on the exception is the exact URL requested.
        """
        request_headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if headers:
            request_headers.update(headers)

        _logger.debug("GET %s headers=%s", redact_url(url), redact_for_log(request_headers))

        try:
            async with self._http.get(url, headers=request_headers, timeout=self._timeout) as resp:
                body = await resp.read()
                status = resp.status
                reason = resp.reason or ""
                charset = resp.charset or "utf-8"
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise LotFinderTransportError(
                f"Request to {redact_url(url)} failed: {exc}",
                url=url,
                detail=str(exc) or type(exc).__name__,
            ) from exc

        if not 200 <= status < 300:
            detail = error_detail(status, reason, body.decode("utf-8", errors="replace"))
            raise LotFinderTransportError(
                f"HTTP {status} from {redact_url(url)}: {detail[:200]}",
                status_code=status,
                url=url,
                detail=detail,
            )

        try:
            text = body.decode(charset)
        except (UnicodeDecodeError, LookupError) as exc:
            raise LotFinderTransportError(
                f"Undecodable {charset} body from {redact_url(url)}",
                status_code=status,
                url=url,
                detail="Response could not be decoded",
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise LotFinderTransportError(
                f"Invalid JSON from {redact_url(url)}: {text[:200]}",
                status_code=status,
                url=url,
                detail="Response was not valid JSON",
            ) from exc
