"""Per-outcode coverage statistics lookup."""

from __future__ import annotations

import math
from collections.abc import Iterable

from ukgeotarget.dataset import ReferenceDataset
from ukgeotarget.logging import get_logger
from ukgeotarget.models import OutcodeStats
from ukgeotarget.postcode import normalise_outcode

logger = get_logger(__name__)

_NUMERIC_FIELDS = (
    "approx_radius_km",
    "approx_diameter_km",
    "centroid_easting_m",
    "centroid_northing_m",
)


def _to_measure(value: object) -> float | None:
    """Coerce a stats column to a finite non-negative float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def stats_from_row(row) -> OutcodeStats | None:
    """Build OutcodeStats from a stats row, or None if any field is unusable."""
    outcode = normalise_outcode(row["outcode"] or "")
    if not outcode:
        return None
    values = {}
    for field in _NUMERIC_FIELDS:
        measure = _to_measure(row[field])
        if measure is None:
            return None
        values[field] = measure
    return OutcodeStats(outcode=outcode, **values)


class CoverageLookup:
    """Fetches radius, diameter and centroid for a set of outcodes."""

    def __init__(self, dataset: ReferenceDataset):
        self._dataset = dataset

    async def coverage_for(self, outcodes: Iterable[str]) -> dict[str, OutcodeStats]:
        """
        Return ``{outcode: OutcodeStats}`` for the requested outcodes that have stats.

        Outcodes without a usable stats row are simply absent. Raises
        DatasetUnavailable if the stats table cannot be reached.
        """
        wanted = {normalise_outcode(o) for o in outcodes} - {""}
        if not wanted:
            return {}

        coverage: dict[str, OutcodeStats] = {}
        for row in await self._dataset.stats_rows(wanted):
            stats = stats_from_row(row)
            if stats is None:
                logger.warning("stats_row_dropped", outcode=row["outcode"])
                continue
            if stats.outcode in wanted:
                coverage[stats.outcode] = stats

        logger.debug("coverage_fetched", requested=len(wanted), found=len(coverage))
        return coverage
