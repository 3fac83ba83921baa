"""
backend/booking_service/integrations/http.py

Base HTTP client for internal collaborator APIs (seller and user services).
"""

import logging

import httpx

logger = logging.getLogger(__name__)


class DirectoryError(Exception):
    """Collaborator unreachable or answered with something unusable."""


class InternalApiClient:
    """Synchronous JSON client over httpx."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def close(self) -> None:
        self._client.close()

    def _get(self, path: str) -> httpx.Response:
        """
        GET `path`, returning the response for 2xx and 404.

        Anything else (transport errors, 5xx, other 4xx) is a DirectoryError;
        callers decide what a 404 means.
        """
        try:
            resp = self._client.get(path)
        except httpx.HTTPError as e:
            logger.error(f"API request failed: GET {self.base_url}{path} -> {e}")
            raise DirectoryError(f"GET {path}: {e}") from e

        if resp.status_code == 404 or resp.is_success:
            return resp

        logger.error(f"API error: GET {self.base_url}{path} -> {resp.status_code}")
        raise DirectoryError(f"GET {path}: unexpected status {resp.status_code}")

    def _parse(self, model, resp: httpx.Response):
        try:
            return model.model_validate(resp.json())
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueError
            raise DirectoryError(f"invalid {model.__name__} payload: {e}") from e
