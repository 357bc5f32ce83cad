"""Typed result models for ukgeotarget."""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

POSTAL_CODE_SYSTEM = "GB_POSTCODE_DISTRICT"


class ResolutionStatus(str, Enum):
    """How completely a location could be resolved."""

    RESOLVED = "resolved"
    PARTIAL = "partial"          # outcodes found, stats unreachable
    UNAVAILABLE = "unavailable"  # reference dataset unreachable


@dataclass(frozen=True)
class OutcodeStats:
    """Approximate geometry of one postcode district."""

    outcode: str
    approx_radius_km: float
    approx_diameter_km: float
    centroid_easting_m: float    # OS National Grid
    centroid_northing_m: float   # OS National Grid

    def to_dict(self) -> dict:
        return {
            "outcode": self.outcode,
            "approx_radius_km": self.approx_radius_km,
            "approx_diameter_km": self.approx_diameter_km,
            "centroid_easting_m": self.centroid_easting_m,
            "centroid_northing_m": self.centroid_northing_m,
        }


@dataclass(frozen=True)
class PlaceRecord:
    """One row of the place-to-outcode reference table."""

    outcode: str
    county_unitary: str | None
    district_borough: str | None
    region: str | None


@dataclass(frozen=True)
class Resolved:
    """The location was looked up; *outcodes* may legitimately be empty."""

    outcodes: tuple[str, ...] = ()


@dataclass(frozen=True)
class Unavailable:
    """The reference dataset could not be consulted."""

    reason: str

    @property
    def outcodes(self) -> tuple[str, ...]:
        return ()


Resolution = Resolved | Unavailable


@dataclass(frozen=True)
class PlatformSerializations:
    """The literal shapes each ad platform's bulk location upload accepts."""

    # Identity mappings of postal_codes, pending per-platform geo ID lookup
    # (e.g. Google Ads geo target constants).
    PROVISIONAL: ClassVar[frozenset[str]] = frozenset(
        {
            "tiktok_postal_codes",
            "linkedin_postal_codes",
            "pinterest_postal_codes",
            "google_ads_postal_codes",
        }
    )

    meta_bulk_text: str
    tiktok_postal_codes: tuple[str, ...]
    linkedin_postal_codes: tuple[str, ...]
    pinterest_postal_codes: tuple[str, ...]
    google_ads_postal_codes: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "meta_bulk_text": self.meta_bulk_text,
            "tiktok_postal_codes": list(self.tiktok_postal_codes),
            "linkedin_postal_codes": list(self.linkedin_postal_codes),
            "pinterest_postal_codes": list(self.pinterest_postal_codes),
            "google_ads_postal_codes": list(self.google_ads_postal_codes),
        }


@dataclass(frozen=True)
class TargetingResult:
    """Complete result of a location -> postcode district targeting lookup."""

    postal_codes: tuple[str, ...]
    postal_code_system: str
    coverage: tuple[OutcodeStats, ...]
    platform_serializations: PlatformSerializations
    status: ResolutionStatus = ResolutionStatus.RESOLVED

    @property
    def needs_review(self) -> bool:
        """True when a human has to pick the targeting by hand."""
        return not self.postal_codes

    def to_dict(self) -> dict:
        """Convert to a plain dictionary (useful for JSON serialisation)."""
        return {
            "postal_codes": list(self.postal_codes),
            "postal_code_system": self.postal_code_system,
            "coverage": [item.to_dict() for item in self.coverage],
            "platform_serializations": self.platform_serializations.to_dict(),
        }
