"""Remote HTTP catalog source."""

from typing import Any, Dict, List, Optional

from bridge_aid.logging import get_logger

from .base import HTTPResourceSource, extract_records
from .exceptions import SourceConfigurationError

logger = get_logger(__name__, component="source")


class RemoteCatalogSource(HTTPResourceSource):
    """Fetches the catalog from a remote JSON endpoint.

    API Details:
        Method: GET
        Authentication: optional ``Authorization: Bearer <key>``; keys of the
            ``id:secret`` form are also sent as ``X-API-Key``
        Response: a JSON array, or an object wrapping the array under
            ``resources``, ``data``, ``results`` or ``organizations``
    """

    name = "api"

    def __init__(
        self,
        url: Optional[str],
        api_key: Optional[str] = None,
        timeout: int = 30,
        user_agent: str = "BridgeAid/0.1",
    ) -> None:
        if not url or not url.strip():
            raise SourceConfigurationError("RESOURCE_API_URL not configured")
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.url = url.strip()
        self.api_key = api_key

    def _auth_headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if ":" in self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def fetch_records(self) -> List[Any]:
        """Fetch the remote catalog.

        Raises:
            SourceHTTPError: On HTTP or connection failure
            SourceTimeoutError: On timeout
            SourceResponseError: On an unparseable body
        """
        logger.info(
            "Fetching remote catalog",
            extra={"event": "source.remote.fetching", "url": self.url},
        )
        payload = self._make_request(self.url, headers=self._auth_headers())
        records = extract_records(payload, origin=self.url)

        logger.info(
            f"Fetched {len(records)} records from remote catalog",
            extra={
                "event": "source.remote.fetched",
                "url": self.url,
                "records_count": len(records),
            },
        )
        return records
