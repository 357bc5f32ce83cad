"""
Job Location Targeting — Interactive CLI
========================================
Thin wrapper around the ukgeotarget library.

Usage:
    ukgeotarget                 # interactive mode
    ukgeotarget "Ayrshire"      # single lookup, JSON on stdout
    ukgeotarget "G64 1AB"

Database paths are read from the environment (or a .env file):
    UKGEOTARGET_PLACES_DB   SQLite file with the os_open_names table
    UKGEOTARGET_STATS_DB    SQLite file with postcode_district_stats
                            (defaults to UKGEOTARGET_PLACES_DB)

If not set, looks for postcode_locations.db in the current directory.
"""

import asyncio
import json
import sys

from ukgeotarget import GeoTargeting
from ukgeotarget.config import Settings
from ukgeotarget.exceptions import DatasetUnavailable
from ukgeotarget.logging import configure_logging
from ukgeotarget.models import ResolutionStatus, TargetingResult

_BANNER = """\
╔══════════════════════════════════════╗
║      Job Location Targeting          ║
║  Postcode / Area → Outcodes          ║
╚══════════════════════════════════════╝
Type 'q' to quit.
"""


def _print_result(result: TargetingResult) -> None:
    if result.status is ResolutionStatus.UNAVAILABLE:
        print("  ✗ Reference data unavailable, try again later.")
        return
    if result.needs_review:
        print("  ✗ No postcode districts found (needs manual review).")
        return

    print(f"  ✓ {len(result.postal_codes)} postcode district(s)")
    if result.status is ResolutionStatus.PARTIAL:
        print("  ! Coverage stats unavailable.")
    stats = {item.outcode: item for item in result.coverage}
    print()
    print("  ┌──────────┬─────────────┬───────────────┐")
    print("  │ Outcode  │ Radius (km) │ Diameter (km) │")
    print("  ├──────────┼─────────────┼───────────────┤")
    for outcode in result.postal_codes:
        item = stats.get(outcode)
        radius = f"{item.approx_radius_km:.2f}" if item else "-"
        diameter = f"{item.approx_diameter_km:.2f}" if item else "-"
        print(f"  │ {outcode:<8} │ {radius:>11} │ {diameter:>13} │")
    print("  └──────────┴─────────────┴───────────────┘")


async def _run_interactive(client: GeoTargeting) -> None:
    print(_BANNER)

    while True:
        try:
            raw = (await asyncio.to_thread(input, "\nLocation:  ")).strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if raw.lower() in ("q", "quit", "exit"):
            print("Bye!")
            break
        if not raw:
            print("  ✗ Enter a postcode, outcode or area name.")
            continue

        result = await client.resolve_targeting(raw)
        _print_result(result)


async def _run(settings: Settings, argv: list[str]) -> int:
    async with GeoTargeting.from_settings(settings) as client:
        try:
            await client.dataset.open()
        except DatasetUnavailable as exc:
            print(f"Error: {exc}", file=sys.stderr)
            print(
                "Set UKGEOTARGET_PLACES_DB (and optionally UKGEOTARGET_STATS_DB), "
                "or run from the directory containing postcode_locations.db.",
                file=sys.stderr,
            )
            return 2

        if argv:
            result = await client.resolve_targeting(" ".join(argv))
            print(json.dumps(result.to_dict(), indent=2))
            return 1 if result.needs_review else 0

        await _run_interactive(client)
        return 0


def main() -> None:
    """Entry point — supports both CLI args and interactive mode."""
    settings = Settings()
    configure_logging(json_output=settings.log_json, level=settings.log_level_number)
    sys.exit(asyncio.run(_run(settings, sys.argv[1:])))


if __name__ == "__main__":
    main()
