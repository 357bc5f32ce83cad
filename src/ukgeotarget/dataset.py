"""Read-only access to the place and postcode-district reference tables."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import aiosqlite

from ukgeotarget import area
from ukgeotarget._db import _DatabasePool
from ukgeotarget.config import Settings
from ukgeotarget.exceptions import DatasetUnavailable
from ukgeotarget.models import PlaceRecord
from ukgeotarget.postcode import normalise_outcode

PLACES_TABLE = "os_open_names"
STATS_TABLE = "postcode_district_stats"

# SQLite's default SQLITE_MAX_VARIABLE_NUMBER on older builds is 999
_MAX_PARAMS = 900

_AREA_SQL = f"""
    SELECT DISTINCT UPPER(TRIM(POSTCODE_DISTRICT)) AS outcode
    FROM {PLACES_TABLE}
    WHERE POSTCODE_DISTRICT IS NOT NULL AND TRIM(POSTCODE_DISTRICT) <> ''
      AND (
        casefold(COUNTY_UNITARY) LIKE ? ESCAPE '\\'
        OR casefold(DISTRICT_BOROUGH) LIKE ? ESCAPE '\\'
        OR casefold(REGION) LIKE ? ESCAPE '\\'
      )
    ORDER BY outcode
"""

_COUNTY_SQL = f"""
    SELECT DISTINCT UPPER(TRIM(POSTCODE_DISTRICT)) AS outcode
    FROM {PLACES_TABLE}
    WHERE POSTCODE_DISTRICT IS NOT NULL AND TRIM(POSTCODE_DISTRICT) <> ''
      AND casefold(COUNTY_UNITARY) LIKE ? ESCAPE '\\'
    ORDER BY outcode
"""

_PREFIX_SQL = f"""
    SELECT POSTCODE_DISTRICT, COUNTY_UNITARY, DISTRICT_BOROUGH, REGION
    FROM {PLACES_TABLE}
    WHERE UPPER(TRIM(POSTCODE_DISTRICT)) LIKE ? ESCAPE '\\'
    ORDER BY UPPER(TRIM(POSTCODE_DISTRICT))
    LIMIT ?
"""

_STATS_SQL = """
    SELECT UPPER(TRIM(outcode)) AS outcode, approx_radius_km, approx_diameter_km,
           centroid_easting_m, centroid_northing_m
    FROM {table}
    WHERE UPPER(TRIM(outcode)) IN ({placeholders})
"""


class ReferenceDataset:
    """
    Handle on the two reference tables.

    The host application owns its lifecycle: call ``open()`` at startup
    to validate the schema, ``health_check()`` from probes, and
    ``close()`` on shutdown. Queries open pooled connections lazily, so
    ``open()`` is optional.
    """

    def __init__(
        self,
        places_db: str | Path,
        stats_db: str | Path | None = None,
        *,
        pool_size: int = 5,
        acquire_timeout: float = 5.0,
        query_timeout: float = 5.0,
    ):
        pool_options = {
            "size": pool_size,
            "acquire_timeout": acquire_timeout,
            "query_timeout": query_timeout,
        }
        places_path = Path(places_db)
        stats_path = Path(stats_db) if stats_db is not None else places_path
        self._places = _DatabasePool(places_path, "Place names", **pool_options)
        if stats_path == places_path:
            self._stats = self._places
        else:
            self._stats = _DatabasePool(
                stats_path, "District stats", **pool_options
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> ReferenceDataset:
        return cls(
            settings.places_db,
            settings.stats_db_path,
            pool_size=settings.pool_size,
            acquire_timeout=settings.acquire_timeout,
            query_timeout=settings.query_timeout,
        )

    # ── Lifecycle ─────────────────────────────────────────────────

    def _schema(self) -> list[tuple[tuple[str, ...], _DatabasePool, list[str]]]:
        """(status keys, pool, expected tables) for each distinct database."""
        if self._stats is self._places:
            return [
                (("places_db", "stats_db"), self._places, [PLACES_TABLE, STATS_TABLE])
            ]
        return [
            (("places_db",), self._places, [PLACES_TABLE]),
            (("stats_db",), self._stats, [STATS_TABLE]),
        ]

    async def open(self) -> None:
        """Validate that both tables exist. Raises DatasetUnavailable subclasses."""
        for _, pool, tables in self._schema():
            await pool.validate_tables(tables)

    async def health_check(self) -> dict:
        """
        Verify the reference data is reachable and has the expected tables.

        Returns a dict with status information.
        """
        status: dict = {"healthy": True, "places_db": "ok", "stats_db": "ok"}
        for keys, pool, tables in self._schema():
            try:
                await pool.validate_tables(tables)
            except DatasetUnavailable as exc:
                status["healthy"] = False
                for key in keys:
                    status[key] = str(exc)
        return status

    async def close(self) -> None:
        """Close both connection pools."""
        await self._places.close()
        if self._stats is not self._places:
            await self._stats.close()

    async def __aenter__(self) -> ReferenceDataset:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── Queries ───────────────────────────────────────────────────

    async def outcodes_matching_area(self, pattern: str) -> list[str]:
        """Distinct outcodes whose county, district or region matches *pattern*."""
        folded = pattern.casefold()
        rows = await self._places.fetch_all(_AREA_SQL, (folded, folded, folded))
        return [row["outcode"] for row in rows]

    async def outcodes_in_county(self, pattern: str) -> list[str]:
        """Distinct outcodes whose county/unitary authority matches *pattern*."""
        rows = await self._places.fetch_all(_COUNTY_SQL, (pattern.casefold(),))
        return [row["outcode"] for row in rows]

    async def places_by_district_prefix(
        self, prefix: str, limit: int = 2000
    ) -> list[PlaceRecord]:
        """Place rows whose outcode starts with *prefix*, e.g. 'G6' -> G6x rows."""
        pattern = area.prefix_pattern(prefix)
        if not pattern:
            return []
        rows = await self._places.fetch_all(_PREFIX_SQL, (pattern, limit))
        return [
            PlaceRecord(
                outcode=normalise_outcode(row["POSTCODE_DISTRICT"]),
                county_unitary=row["COUNTY_UNITARY"],
                district_borough=row["DISTRICT_BOROUGH"],
                region=row["REGION"],
            )
            for row in rows
        ]

    async def stats_rows(self, outcodes: Iterable[str]) -> list[aiosqlite.Row]:
        """Raw stats rows for *outcodes*, batched into as few queries as possible."""
        wanted = sorted(set(outcodes))
        rows: list[aiosqlite.Row] = []
        for start in range(0, len(wanted), _MAX_PARAMS):
            batch = wanted[start : start + _MAX_PARAMS]
            sql = _STATS_SQL.format(
                table=STATS_TABLE, placeholders=",".join("?" * len(batch))
            )
            rows.extend(await self._stats.fetch_all(sql, batch))
        return rows
