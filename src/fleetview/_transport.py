"""HTTP transport for the fleet REST API."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from fleetview._constants import USER_AGENT
from fleetview.config import FleetViewConfig
from fleetview.exceptions import FleetViewTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by ingestion modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...


class HttpTransport:
    """JSON-over-HTTP GET transport bound to the configured API base URL."""

    def __init__(self, config: FleetViewConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.http_timeout)

    async def get_json(self, endpoint: str) -> Any:
        """GET *endpoint* and return the decoded JSON body.

        Raises
        ------
        FleetViewTransportError
            On network errors, non-200 responses, or a body that is not JSON.
        """
        url = f"{self._config.api_base_url.rstrip('/')}{endpoint}"
        headers = {"accept": "application/json", "user-agent": USER_AGENT}

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise FleetViewTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except FleetViewTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise FleetViewTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FleetViewTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc
