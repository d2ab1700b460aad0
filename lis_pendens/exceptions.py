"""Address resolution exceptions."""

from __future__ import annotations

from typing import Any


class ResolutionError(Exception):
    """Base class for failures that stop a filing from being resolved."""


class UnknownJurisdiction(ResolutionError):
    """Raised when a filing's county has no registry code configured."""

    def __init__(self, jurisdiction: str):
        self.jurisdiction = jurisdiction
        super().__init__(
            f"Unknown jurisdiction: {jurisdiction!r}. Add it to JURISDICTION_CODES."
        )


class RegistryUnavailable(ResolutionError):
    """Raised when the parcel registry could not answer a query.

    Distinct from a search that returned zero parcels; callers should retry
    the filing later rather than treat it as a non-match.
    """

    def __init__(self, message: str, query: Any = None):
        self.query = query
        super().__init__(message)
