"""
Resolve a Lis Pendens filing to a property address.

The clerk's filing names the grantee and carries a short legal description but
no situs address. This module searches the parcel registry by owner name in
two tiers and uses the subdivision keywords to pick among candidates:

  START -> EXACT_QUERIED -> RESOLVED
                         -> ESCALATE_TO_FUZZY -> FUZZY_QUERIED -> RESOLVED | EXHAUSTED
                         -> EXHAUSTED

Only an exact search with zero results escalates to the surname search. An
exact search with several owners but no confident legal match ends there.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Any, Iterable, Mapping, Optional

from loguru import logger

from config.resolution import (
    CORPORATE_KEYWORDS,
    DEFAULT_CONCURRENCY,
    FUZZY_RESULT_LIMIT,
    JURISDICTION_CODES,
    SUBDIVISION_STOP_WORDS,
)
from lis_pendens.exceptions import ResolutionError
from lis_pendens.models.filing import CandidateParcel, RawFiling
from lis_pendens.models.resolution import (
    Cancelled,
    MatchOutcome,
    Matched,
    NoLegalMatch,
    NormalizedParty,
    NotFound,
    ResolutionDiagnostics,
    ResolutionResult,
    SubdivisionKey,
    Tier,
)
from lis_pendens.services import candidate_scorer
from lis_pendens.services.eligibility import filter_eligibility
from lis_pendens.services.parcel_registry import ParcelRegistry
from lis_pendens.services.registry_query import (
    RegistryQuery,
    build_exact_query,
    build_fuzzy_query,
    resolve_county_code,
)
from lis_pendens.utils.legal_description import extract_subdivision
from lis_pendens.utils.logging_utils import Timer, log_search
from lis_pendens.utils.name_normalizer import extract_surname, meaningful_name_tokens, normalize

TAG = "[RESOLVE]"


class ResolutionState(str, Enum):
    START = "start"
    EXACT_QUERIED = "exact_queried"
    ESCALATE_TO_FUZZY = "escalate_to_fuzzy"
    FUZZY_QUERIED = "fuzzy_queried"
    RESOLVED = "resolved"
    EXHAUSTED = "exhausted"


@dataclass(slots=True)
class ResolutionContext:
    """Per-filing working state; owned by one ``resolve_address`` call."""

    filing: RawFiling
    party: NormalizedParty
    key: SubdivisionKey
    state: ResolutionState = ResolutionState.START
    surname: Optional[str] = None
    candidate_counts: dict[str, int] = field(default_factory=dict)
    outcome: Optional[MatchOutcome] = None
    lookup_status: str = "pending"
    cancelled: bool = False
    log: Any = logger


@dataclass(frozen=True)
class BatchItem:
    filing: RawFiling
    result: Optional[ResolutionResult] = None
    error: Optional[ResolutionError] = None


def _lookup_status(outcome: MatchOutcome, tier: Tier) -> str:
    if isinstance(outcome, Matched):
        return "matched"
    if isinstance(outcome, Cancelled):
        return "cancelled"
    if isinstance(outcome, NoLegalMatch):
        return "no_legal_match" if tier is Tier.EXACT else "no_match_found"
    return "not_found"


class AddressResolver:
    """Two-tier owner search plus legal-description scoring for one filing at a time."""

    def __init__(
        self,
        registry: ParcelRegistry,
        *,
        jurisdiction_codes: Mapping[str, int] = JURISDICTION_CODES,
        stop_words: AbstractSet[str] = SUBDIVISION_STOP_WORDS,
        corporate_keywords: Iterable[str] = CORPORATE_KEYWORDS,
        fuzzy_result_limit: int = FUZZY_RESULT_LIMIT,
    ) -> None:
        self.registry = registry
        self.jurisdiction_codes = jurisdiction_codes
        self.stop_words = stop_words
        self.corporate_keywords = tuple(corporate_keywords)
        self.fuzzy_result_limit = fuzzy_result_limit

    async def resolve_address(
        self,
        filing: RawFiling,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ResolutionResult:
        """Resolve one filing.

        Raises:
            UnknownJurisdiction: before any registry call.
            RegistryUnavailable: when either tier's registry call fails.
        """
        resolve_county_code(filing.jurisdiction, self.jurisdiction_codes)

        ctx = ResolutionContext(
            filing=filing,
            party=normalize(filing.grantee_name_block),
            key=extract_subdivision(filing.legal_description, self.stop_words),
            log=logger.bind(document_number=filing.document_number),
        )
        log = ctx.log
        log.info(
            f'{TAG} ═══ {filing.document_number} ═══ grantee="{ctx.party.primary_name}", '
            f'subdivision="{ctx.key.cleaned}"'
        )

        if not ctx.party.primary_name:
            log.info(f"{TAG}   SKIP: no grantee name on filing")
            self._finish_tier(ctx, NotFound(), Tier.EXACT)
            return self._result(ctx)

        await self._run_exact(ctx, cancel_event)
        if ctx.state is ResolutionState.ESCALATE_TO_FUZZY:
            await self._run_fuzzy(ctx, cancel_event)

        result = self._result(ctx)
        log.info(
            f"{TAG}   {ctx.state.value.upper()}: status={ctx.lookup_status}, "
            f"counts={ctx.candidate_counts}, eligible={result.eligibility.is_eligible}"
        )
        return result

    async def resolve_batch(
        self,
        filings: Iterable[RawFiling],
        concurrency: int = DEFAULT_CONCURRENCY,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> list[BatchItem]:
        """Resolve filings concurrently; one failing filing does not stop the rest."""
        sem = asyncio.Semaphore(max(1, concurrency))

        async def _one(filing: RawFiling) -> BatchItem:
            async with sem:
                try:
                    result = await self.resolve_address(filing, cancel_event)
                except ResolutionError as exc:
                    logger.bind(document_number=filing.document_number).warning(
                        f"{TAG} {filing.document_number}: {type(exc).__name__}: {exc}"
                    )
                    return BatchItem(filing=filing, error=exc)
                return BatchItem(filing=filing, result=result)

        items = await asyncio.gather(*(_one(f) for f in filings))
        failed = sum(1 for item in items if item.error is not None)
        matched = sum(1 for item in items if item.result is not None and item.result.is_matched)
        logger.info(
            f"{TAG} ═══ Summary: {len(items)} filings, {matched} matched, {failed} failed ═══"
        )
        return list(items)

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    async def _run_exact(self, ctx: ResolutionContext, cancel_event: Optional[asyncio.Event]) -> None:
        query = build_exact_query(ctx.party.primary_name, ctx.filing.jurisdiction, self.jurisdiction_codes)
        candidates = await self._query(ctx, query, cancel_event)
        if candidates is None:
            return
        ctx.state = ResolutionState.EXACT_QUERIED
        ctx.candidate_counts[Tier.EXACT.value] = len(candidates)

        if not candidates:
            ctx.surname = extract_surname(ctx.party.primary_name)
            ctx.state = ResolutionState.ESCALATE_TO_FUZZY
            ctx.log.info(f'{TAG}   exact: 0 results, retrying with surname "{ctx.surname}"')
            return

        outcome = candidate_scorer.score(candidates, ctx.key, tier=Tier.EXACT, log=ctx.log)
        self._finish_tier(ctx, outcome, Tier.EXACT)

    async def _run_fuzzy(self, ctx: ResolutionContext, cancel_event: Optional[asyncio.Event]) -> None:
        surname = ctx.surname or extract_surname(ctx.party.primary_name)
        others = meaningful_name_tokens(ctx.party.primary_name, surname)
        plan = build_fuzzy_query(
            surname,
            others,
            ctx.filing.jurisdiction,
            self.jurisdiction_codes,
            result_limit=self.fuzzy_result_limit,
        )
        candidates = await self._query(ctx, plan.tight, cancel_event)
        if candidates is None:
            return
        ctx.state = ResolutionState.FUZZY_QUERIED
        ctx.candidate_counts[Tier.FUZZY.value] = len(candidates)

        outcome = candidate_scorer.score(
            candidates, ctx.key, owner_filter=ctx.party, tier=Tier.FUZZY, log=ctx.log
        )
        self._finish_tier(ctx, outcome, Tier.FUZZY)

    async def _query(
        self,
        ctx: ResolutionContext,
        query: RegistryQuery,
        cancel_event: Optional[asyncio.Event],
    ) -> Optional[list[CandidateParcel]]:
        """Issue one registry call; None means the filing was cancelled first."""
        if cancel_event is not None and cancel_event.is_set():
            self._cancel(ctx)
            return None

        with Timer() as timer:
            if cancel_event is None:
                candidates = await self.registry.query(query)
            else:
                candidates = await self._race_cancel(query, cancel_event)
        if candidates is None:
            self._cancel(ctx)
            return None

        log_search(
            source="parcel_registry",
            query=query.where,
            results_raw=len(candidates),
            duration_ms=timer.elapsed_ms,
            tier=query.tier.value,
            document_number=ctx.filing.document_number,
        )
        return candidates

    async def _race_cancel(
        self,
        query: RegistryQuery,
        cancel_event: asyncio.Event,
    ) -> Optional[list[CandidateParcel]]:
        call = asyncio.ensure_future(self.registry.query(query))
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait({call, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not call.done():
                call.cancel()
        if call in done:
            return call.result()
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _cancel(self, ctx: ResolutionContext) -> None:
        seen = sum(ctx.candidate_counts.values())
        ctx.cancelled = True
        ctx.outcome = Cancelled(candidate_count=seen)
        ctx.lookup_status = "cancelled"
        ctx.state = ResolutionState.EXHAUSTED
        ctx.log.info(f"{TAG}   CANCELLED after {len(ctx.candidate_counts)} tier(s)")

    def _finish_tier(self, ctx: ResolutionContext, outcome: MatchOutcome, tier: Tier) -> None:
        ctx.outcome = outcome
        ctx.lookup_status = _lookup_status(outcome, tier)
        if isinstance(outcome, Matched):
            ctx.state = ResolutionState.RESOLVED
            ctx.log.info(
                f"{TAG}   ✓ RESOLVED via {outcome.match_method.value} → "
                f'parcel={outcome.parcel_number}, address="{outcome.address_line}"'
            )
        else:
            ctx.state = ResolutionState.EXHAUSTED

    def _result(self, ctx: ResolutionContext) -> ResolutionResult:
        outcome = ctx.outcome if ctx.outcome is not None else NotFound()
        eligibility = filter_eligibility(
            ctx.party.primary_name,
            ctx.filing.legal_description,
            outcome,
            self.corporate_keywords,
        )
        return ResolutionResult(
            outcome=outcome,
            eligibility=eligibility,
            diagnostics=ResolutionDiagnostics(
                candidate_counts_by_tier=dict(ctx.candidate_counts),
                keywords_used=tuple(sorted(ctx.key.keywords)),
                surname=ctx.surname,
                cancelled=ctx.cancelled,
                lookup_status=ctx.lookup_status,
            ),
        )
