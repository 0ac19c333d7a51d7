"""
HTTP forwarder for zone temperature readings.

Posts a JSON array to the collector:
    [{"id": "RADIATOR0", "temp": 17.94}, {"id": "RADIATOR3", "temp": 20.68}]
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from evohome_core.payloads import ZoneTemperature


ZONE_ID_PREFIX = "RADIATOR"


def build_body(reading: ZoneTemperature) -> List[Dict[str, Any]]:
    return [
        {"id": f"{ZONE_ID_PREFIX}{zone_id}", "temp": temp}
        for zone_id, temp in reading.temperatures.items()
    ]


class HttpForwarder:
    """Fire-and-forget POST of readings. Failures are logged, never raised."""

    def __init__(
        self,
        endpoint: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Raises:
            httpx.InvalidURL: endpoint cannot be parsed
            ValueError: endpoint is not an http or https URL
        """
        # Fail at startup on an unusable endpoint, not on the first post
        url = httpx.URL(endpoint)
        if url.scheme not in ("http", "https"):
            raise ValueError(f"Endpoint must be an http(s) URL, got '{endpoint}'")
        self.endpoint = endpoint
        self.logger = logging.getLogger(self.__class__.__name__)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def forward(self, reading: ZoneTemperature) -> bool:
        """Post one reading. Returns False when the collector was not reached."""
        body = build_body(reading)
        if not body:
            return False

        self.logger.debug(f"Posting {body} to {self.endpoint}")
        try:
            response = self._client.post(self.endpoint, json=body)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, httpx.CookieConflict) as e:
            self.logger.warning(f"Failed to post data to {self.endpoint} ({e})")
            return False

        self.logger.debug(f"Response: {response.text}")
        return True

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
