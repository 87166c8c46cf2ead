"""Settings endpoint serving the client's credentials as JSON."""

from __future__ import annotations

from typing import Any

from lotfinder._transport import Transport
from lotfinder.config import LotFinderConfig
from lotfinder.exceptions import LotFinderConfigError, LotFinderTransportError


async def fetch_remote_config(transport: Transport, url: str, **overrides: Any) -> LotFinderConfig:
    """Load a complete :class:`LotFinderConfig` from a settings endpoint.

    The endpoint returns a flat JSON object using the ``LOTFINDER_*`` or
    ``REACT_APP_*`` key names understood by :meth:`LotFinderConfig.from_mapping`.

    Raises
    ------
    LotFinderConfigError
        When the endpoint is unreachable, answers with a non-success status,
        or omits required keys.
    """
    try:
        payload = await transport.get_json(url)
    except LotFinderTransportError as exc:
        if exc.status_code == 404:
            raise LotFinderConfigError(
                "Configuration endpoint not found. When developing locally, "
                "set the LOTFINDER_* environment variables instead."
            ) from exc
        if exc.status_code is not None:
            raise LotFinderConfigError(f"Configuration server returned status {exc.status_code}") from exc
        raise LotFinderConfigError(f"Failed to load configuration: {exc.detail}") from exc

    if not isinstance(payload, dict):
        raise LotFinderConfigError("Configuration endpoint returned an unexpected document")

    return LotFinderConfig.from_mapping(payload, **overrides).require_complete()
