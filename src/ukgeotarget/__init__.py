"""ukgeotarget — Resolve job locations to UK postcode district ad targeting."""

from ukgeotarget.client import GeoTargeting
from ukgeotarget.dataset import ReferenceDataset
from ukgeotarget.exceptions import (
    DatabaseInvalid,
    DatabaseNotFound,
    DatasetUnavailable,
    PostcodeInvalid,
    UKGeoTargetError,
)
from ukgeotarget.models import (
    OutcodeStats,
    PlaceRecord,
    PlatformSerializations,
    ResolutionStatus,
    Resolved,
    TargetingResult,
    Unavailable,
)
from ukgeotarget.serializer import serialize

__all__ = [
    "GeoTargeting",
    "ReferenceDataset",
    "serialize",
    "TargetingResult",
    "OutcodeStats",
    "PlaceRecord",
    "PlatformSerializations",
    "ResolutionStatus",
    "Resolved",
    "Unavailable",
    "UKGeoTargetError",
    "PostcodeInvalid",
    "DatasetUnavailable",
    "DatabaseNotFound",
    "DatabaseInvalid",
]
