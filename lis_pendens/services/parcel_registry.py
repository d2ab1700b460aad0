"""
Parcel registry client for the Florida Statewide Cadastral layer.

Primary source:
- ArcGIS FeatureServer layer 0 (DOR NAL parcels, all counties):
  https://services9.arcgis.com/Gh9awoU677aKree0/arcgis/rest/services/Florida_Statewide_Cadastral/FeatureServer/0

Every failure to get a usable answer (HTTP error, timeout, connection error,
non-JSON body, ArcGIS error payload) surfaces as ``RegistryUnavailable`` so it
can never be mistaken for an owner search with no results.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Protocol

import requests
from loguru import logger

from config.resolution import (
    PARCEL_REGISTRY_URL,
    REGISTRY_MAX_RETRIES,
    REGISTRY_RETRY_BACKOFF_SECONDS,
    REGISTRY_TIMEOUT_SECONDS,
)
from lis_pendens.exceptions import RegistryUnavailable
from lis_pendens.models.filing import CandidateParcel
from lis_pendens.services.registry_query import RegistryQuery

TAG = "[REGISTRY]"

RETRY_STATUS = {429, 500, 502, 503, 504}


class ParcelRegistry(Protocol):
    async def query(self, query: RegistryQuery) -> list[CandidateParcel]: ...


class ArcGISParcelRegistry:
    """Owner search against an ArcGIS FeatureServer parcel layer."""

    def __init__(
        self,
        layer_url: str = PARCEL_REGISTRY_URL,
        *,
        timeout_seconds: float = REGISTRY_TIMEOUT_SECONDS,
        max_retries: int = REGISTRY_MAX_RETRIES,
        retry_backoff_seconds: float = REGISTRY_RETRY_BACKOFF_SECONDS,
        session: requests.Session | None = None,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        self.layer_url = layer_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_retries = max(1, max_retries)
        self.retry_backoff_seconds = retry_backoff_seconds
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "LisPendens/ParcelLookup/1.0"})
        self._sleep = sleep_fn

    # ------------------------------------------------------------------
    # ArcGIS query helpers
    # ------------------------------------------------------------------

    def _request_json(self, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.layer_url}/query"
        last_error: Exception | None = None

        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(url, params=params, timeout=self.timeout_seconds)
                response.raise_for_status()
                payload = response.json()
                if not isinstance(payload, dict):
                    raise ValueError(f"Unexpected ArcGIS response type: {type(payload).__name__}")
                if "error" in payload:
                    error = payload["error"]
                    if isinstance(error, dict):
                        details = error.get("details") or []
                        message = error.get("message", "ArcGIS error")
                        raise ValueError(f"{message} | details={details}")
                    raise ValueError(f"ArcGIS error: {error}")
                return payload
            except requests.HTTPError as exc:
                last_error = exc
                status = exc.response.status_code if exc.response is not None else None
                if status not in RETRY_STATUS:
                    break
            except (requests.RequestException, ValueError) as exc:
                last_error = exc

            if attempt == self.max_retries:
                break
            sleep_seconds = self.retry_backoff_seconds * attempt
            logger.warning(
                f"{TAG} request failed (attempt {attempt}/{self.max_retries}): {last_error}. "
                f"Retrying in {sleep_seconds:.1f}s"
            )
            self._sleep(sleep_seconds)

        logger.error(f"{TAG} request failed: where={params.get('where')!r}, error={last_error}")
        raise RegistryUnavailable(
            f"Parcel registry request failed: {last_error}", query=params.get("where")
        ) from last_error

    def fetch(self, query: RegistryQuery) -> list[CandidateParcel]:
        """Run a query synchronously and return candidate parcels in registry order."""
        payload = self._request_json(query.to_params())
        features = payload.get("features")
        if features is None:
            features = []
        if not isinstance(features, list):
            raise RegistryUnavailable(
                "Malformed registry response: 'features' is not a list", query=query.where
            )
        try:
            return [CandidateParcel.from_arcgis_feature(f) for f in features]
        except ValueError as exc:
            logger.error(f"{TAG} malformed feature: where={query.where!r}, error={exc}")
            raise RegistryUnavailable(
                f"Malformed registry response: {exc}", query=query.where
            ) from exc

    async def query(self, query: RegistryQuery) -> list[CandidateParcel]:
        return await asyncio.to_thread(self.fetch, query)

    def close(self) -> None:
        self.session.close()
