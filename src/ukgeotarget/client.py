"""GeoTargeting client — the main entry point for the library."""

from __future__ import annotations

from collections.abc import Iterable

from ukgeotarget.config import Settings
from ukgeotarget.coverage import CoverageLookup
from ukgeotarget.dataset import ReferenceDataset
from ukgeotarget.exceptions import DatasetUnavailable
from ukgeotarget.logging import get_logger
from ukgeotarget.models import (
    OutcodeStats,
    PlaceRecord,
    Resolution,
    ResolutionStatus,
    TargetingResult,
    Unavailable,
)
from ukgeotarget.resolver import AreaResolver
from ukgeotarget.serializer import serialize

logger = get_logger(__name__)


class GeoTargeting:
    """
    Job location -> ad-platform postcode district targeting.

    Takes a ReferenceDataset owned by the caller. Use ``from_settings``
    to have the client build, and later close, its own dataset.
    """

    def __init__(self, dataset: ReferenceDataset, *, owns_dataset: bool = False):
        self._dataset = dataset
        self._owns_dataset = owns_dataset
        self._resolver = AreaResolver(dataset)
        self._coverage = CoverageLookup(dataset)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> GeoTargeting:
        settings = settings if settings is not None else Settings()
        return cls(ReferenceDataset.from_settings(settings), owns_dataset=True)

    @property
    def dataset(self) -> ReferenceDataset:
        return self._dataset

    # ── Public API ────────────────────────────────────────────────

    async def resolve_targeting(self, location: str | None) -> TargetingResult:
        """
        Resolve a job location to postcode districts, stats and platform payloads.

        Always returns a result. Check ``status`` to tell an unreachable
        dataset (``UNAVAILABLE``) or missing stats (``PARTIAL``) apart
        from a location that genuinely matched nothing.
        """
        resolution = await self._resolver.resolve(location)
        if isinstance(resolution, Unavailable):
            return serialize((), {}, status=ResolutionStatus.UNAVAILABLE)

        try:
            coverage = await self._coverage.coverage_for(resolution.outcodes)
        except DatasetUnavailable as exc:
            logger.warning(
                "coverage_unavailable",
                location=location,
                outcodes=len(resolution.outcodes),
                error=str(exc),
            )
            return serialize(resolution.outcodes, {}, status=ResolutionStatus.PARTIAL)

        result = serialize(resolution.outcodes, coverage)
        if result.needs_review:
            logger.info("location_needs_review", location=location)
        return result

    async def resolve(self, location: str | None) -> Resolution:
        """Resolve *location* to outcodes only."""
        return await self._resolver.resolve(location)

    async def coverage_for(self, outcodes: Iterable[str]) -> dict[str, OutcodeStats]:
        """
        Stats for each requested outcode that has them.

        Raises DatasetUnavailable if the stats table cannot be reached.
        """
        return await self._coverage.coverage_for(outcodes)

    async def districts_by_county(self, county: str | None) -> Resolution:
        """Outcodes for a county/unitary authority name only."""
        return await self._resolver.resolve_county(county)

    async def places_in_district(
        self, prefix: str, limit: int = 2000
    ) -> list[PlaceRecord]:
        """Place rows whose outcode starts with *prefix*."""
        return await self._resolver.places_in_district(prefix, limit)

    async def health_check(self) -> dict:
        return await self._dataset.health_check()

    async def close(self) -> None:
        """Close the dataset if this client created it."""
        if self._owns_dataset:
            await self._dataset.close()

    async def __aenter__(self) -> GeoTargeting:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
