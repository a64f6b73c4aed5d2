"""Ballot store reached over HTTP."""

from urllib.parse import quote, urlparse

import httpx

from selection.errors import StoreError
from selection.models import BallotSnapshot, Publication
from selection.stores import register_store
from selection.stores.base import BallotStore, parse_publication, parse_snapshot


@register_store
class HttpBallotStore(BallotStore):
    """Ballot store gateway exposing snapshots and selections as JSON.

    Endpoints:
        GET {base}/snapshots/{reference_point}   snapshot (see JsonFileBallotStore)
        GET {base}/selections/{reference_point}  recorded selection, 404 if none
        PUT {base}/selections/{reference_point}  record a selection
    """

    TIMEOUT = 30.0

    def __init__(self, base_url: str, client: httpx.Client | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = client

    @classmethod
    def can_open(cls, source: str) -> bool:
        return urlparse(str(source)).scheme in ("http", "https")

    def _url(self, kind: str, reference_point: str) -> str:
        return f"{self.base_url}/{kind}/{quote(str(reference_point), safe='')}"

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            if self._client is not None:
                return self._client.request(method, url, **kwargs)
            with httpx.Client(follow_redirects=True, timeout=self.TIMEOUT) as client:
                return client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise StoreError(f"Error contacting ballot store: {e}") from e

    def read_snapshot(self, reference_point: str) -> BallotSnapshot:
        url = self._url("snapshots", reference_point)
        response = self._request("GET", url)
        try:
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise StoreError(
                f"HTTP error fetching snapshot: {e.response.status_code}"
            ) from e
        except ValueError as e:
            raise StoreError(f"Invalid JSON in snapshot from {url}: {e}") from e

        snapshot = parse_snapshot(data, url)
        if snapshot.reference_point != str(reference_point):
            raise StoreError(
                f"Store returned reference point {snapshot.reference_point}, "
                f"not {reference_point}"
            )
        return snapshot

    def get_selection(self, reference_point: str) -> Publication | None:
        url = self._url("selections", reference_point)
        response = self._request("GET", url)
        if response.status_code == 404:
            return None
        try:
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise StoreError(
                f"HTTP error fetching selection: {e.response.status_code}"
            ) from e
        except ValueError as e:
            raise StoreError(f"Invalid JSON in selection from {url}: {e}") from e
        return parse_publication(data, url)

    def _write_selection(self, publication: Publication) -> None:
        url = self._url("selections", publication.reference_point)
        response = self._request("PUT", url, json=publication.to_dict())
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StoreError(
                f"HTTP error recording selection: {e.response.status_code}"
            ) from e
