"""Location string -> postcode district resolution."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from ukgeotarget import area
from ukgeotarget.dataset import ReferenceDataset
from ukgeotarget.exceptions import DatasetUnavailable
from ukgeotarget.logging import get_logger
from ukgeotarget.models import PlaceRecord, Resolution, Resolved, Unavailable
from ukgeotarget.postcode import (
    BareOutcode,
    FullPostcode,
    canonical_outcodes,
    classify,
)

logger = get_logger(__name__)


class AreaResolver:
    """
    Turns a free-form job location into a set of outcodes.

    Full postcodes and bare outcodes are handled as pure string
    operations. Only area names touch the reference dataset.
    """

    def __init__(self, dataset: ReferenceDataset):
        self._dataset = dataset

    async def resolve(self, location: str | None) -> Resolution:
        """
        Resolve *location* to outcodes.

        Never raises: an unmatched location is an empty ``Resolved`` and
        an unreachable dataset is ``Unavailable``.
        """
        parsed = classify(location)
        if parsed is None:
            return Resolved()
        if isinstance(parsed, (FullPostcode, BareOutcode)):
            return Resolved((parsed.outcode,))
        return await self._expand(
            parsed.text, self._dataset.outcodes_matching_area, "area"
        )

    async def resolve_county(self, county: str | None) -> Resolution:
        """Expand a county/unitary authority name, ignoring district and region."""
        if not county or not county.strip():
            return Resolved()
        return await self._expand(
            county, self._dataset.outcodes_in_county, "county"
        )

    async def places_in_district(
        self, prefix: str, limit: int = 2000
    ) -> list[PlaceRecord]:
        """Browse place rows by outcode prefix. Returns [] if unreachable."""
        try:
            return await self._dataset.places_by_district_prefix(prefix, limit)
        except DatasetUnavailable as exc:
            logger.warning(
                "dataset_unavailable",
                query="district_prefix",
                prefix=prefix,
                error=str(exc),
            )
            return []

    async def _expand(
        self,
        text: str,
        query: Callable[[str], Awaitable[list[str]]],
        kind: str,
    ) -> Resolution:
        pattern = area.contains_pattern(text)
        if not pattern:
            return Resolved()
        try:
            rows = await query(pattern)
        except DatasetUnavailable as exc:
            logger.warning(
                "dataset_unavailable", query=kind, pattern=pattern, error=str(exc)
            )
            return Unavailable(reason=str(exc))

        outcodes = canonical_outcodes(rows)
        if outcodes:
            logger.debug(
                "area_expanded", kind=kind, pattern=pattern, outcodes=len(outcodes)
            )
        else:
            logger.info("area_unmatched", kind=kind, pattern=pattern)
        return Resolved(outcodes)
