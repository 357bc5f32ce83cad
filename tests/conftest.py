"""Shared test fixtures — small SQLite reference databases with realistic data."""

import logging
import os
import sqlite3
from pathlib import Path

import pytest
import pytest_asyncio
import structlog

from ukgeotarget import GeoTargeting, ReferenceDataset
from ukgeotarget.config import Settings

PLACE_ROWS = [
    ("G64", "Ayrshire", "Kirkintilloch", "Scotland"),
    ("KA10 ", "Ayrshire", "Troon", "Scotland"),
    ("KA11", "North Ayrshire", "Irvine", "Scotland"),
    ("ka11", "North Ayrshire", "Dreghorn", "Scotland"),
    ("EH1", "City of Edinburgh", "Edinburgh", "Scotland"),
    ("M1", "Greater Manchester", "Manchester", "North West"),
    ("M2", "Greater Manchester", "Manchester", "North West"),
    ("SW1A", "Westminster", "City of Westminster", "London"),
    ("W1A", "Westminster", "City of Westminster", "London"),
    ("LL77", "Ynys Môn", "Llangefni", "Wales"),
    # County name that happens to contain an outcode
    ("ZE1", "Shire of G64", None, "Shetland"),
    # Rows without a district never produce outcodes
    (None, "Ayrshire", "Nowhere", "Scotland"),
    ("", "Ayrshire", "Nowhere", "Scotland"),
]

STATS_ROWS = [
    ("KA10", 3.1, 6.2, 235000.0, 630000.0),
    ("ka11", 4.0, 8.0, 232000.0, 638000.0),
    ("EH1", 0.9, 1.8, 325500.0, 673800.0),
    ("SW1A", 1.2, 2.4, 529900.0, 179900.0),
    # Unusable rows: dropped rather than returned
    ("M1", "not_a_number", 2.0, 384000.0, 398000.0),
    ("M2", None, 2.0, 384500.0, 398500.0),
    ("W1A", -1.0, 2.0, 528900.0, 181300.0),
]


def create_places_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE os_open_names (
            POSTCODE_DISTRICT TEXT,
            COUNTY_UNITARY TEXT,
            DISTRICT_BOROUGH TEXT,
            REGION TEXT
        )
        """
    )
    conn.executemany("INSERT INTO os_open_names VALUES (?, ?, ?, ?)", PLACE_ROWS)


def create_stats_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE postcode_district_stats (
            outcode TEXT PRIMARY KEY,
            approx_radius_km REAL,
            approx_diameter_km REAL,
            centroid_easting_m REAL,
            centroid_northing_m REAL
        )
        """
    )
    conn.executemany(
        "INSERT INTO postcode_district_stats VALUES (?, ?, ?, ?, ?)", STATS_ROWS
    )


@pytest.fixture()
def reference_db(tmp_path: Path) -> Path:
    """One database holding both reference tables."""
    db_path = tmp_path / "postcode_locations.db"
    conn = sqlite3.connect(str(db_path))
    create_places_table(conn)
    create_stats_table(conn)
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture()
def split_dbs(tmp_path: Path) -> tuple[Path, Path]:
    """Place names and district stats in two separate files."""
    places_path = tmp_path / "places.db"
    stats_path = tmp_path / "stats.db"
    for path, create in (
        (places_path, create_places_table),
        (stats_path, create_stats_table),
    ):
        conn = sqlite3.connect(str(path))
        create(conn)
        conn.commit()
        conn.close()
    return places_path, stats_path


@pytest_asyncio.fixture()
async def dataset(reference_db: Path):
    ds = ReferenceDataset(reference_db)
    yield ds
    await ds.close()


@pytest_asyncio.fixture()
async def client(dataset: ReferenceDataset):
    """A GeoTargeting client over the test reference database."""
    yield GeoTargeting(dataset)


@pytest.fixture()
def missing_dataset(tmp_path: Path) -> ReferenceDataset:
    """A dataset whose file does not exist; every query fails."""
    return ReferenceDataset(tmp_path / "nonexistent.db")


@pytest.fixture(autouse=True)
def _isolate_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a local .env or UKGEOTARGET_* variables out of test Settings."""
    for key in list(os.environ):
        if key.startswith("UKGEOTARGET_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(
        Settings,
        "model_config",
        {**Settings.model_config, "env_file": None},
    )


@pytest.fixture(autouse=True)
def _route_logs_through_stdlib() -> None:
    """Send structlog events to stdlib logging so pytest's caplog sees them."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
