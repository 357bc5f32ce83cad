"""Rendering resolved outcodes into the shapes ad platforms accept."""

from collections.abc import Iterable, Mapping
from dataclasses import replace

from ukgeotarget.models import (
    POSTAL_CODE_SYSTEM,
    OutcodeStats,
    PlatformSerializations,
    ResolutionStatus,
    TargetingResult,
)
from ukgeotarget.postcode import canonical_outcodes, normalise_outcode


def platform_serializations(postal_codes: tuple[str, ...]) -> PlatformSerializations:
    """
    Build each platform's payload from the canonical outcode list.

    Meta takes a newline-delimited blob for its "Add locations in bulk"
    box. The others reuse the list unchanged for now
    (see ``PlatformSerializations.PROVISIONAL``).
    """
    return PlatformSerializations(
        meta_bulk_text="\n".join(postal_codes),
        tiktok_postal_codes=postal_codes,
        linkedin_postal_codes=postal_codes,
        pinterest_postal_codes=postal_codes,
        google_ads_postal_codes=postal_codes,
    )


def serialize(
    outcodes: Iterable[str],
    coverage: Mapping[str, OutcodeStats],
    *,
    status: ResolutionStatus = ResolutionStatus.RESOLVED,
) -> TargetingResult:
    """
    Package outcodes and their stats into a TargetingResult.

    Inputs are not modified. Coverage entries for outcodes outside the
    list are ignored; outcodes without stats keep their place in
    ``postal_codes`` but get no coverage entry.
    """
    postal_codes = canonical_outcodes(outcodes)

    by_outcode: dict[str, OutcodeStats] = {}
    for stats in coverage.values():
        key = normalise_outcode(stats.outcode)
        by_outcode[key] = stats if stats.outcode == key else replace(stats, outcode=key)

    return TargetingResult(
        postal_codes=postal_codes,
        postal_code_system=POSTAL_CODE_SYSTEM,
        coverage=tuple(by_outcode[oc] for oc in postal_codes if oc in by_outcode),
        platform_serializations=platform_serializations(postal_codes),
        status=status,
    )
