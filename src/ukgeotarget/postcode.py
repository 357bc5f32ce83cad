"""UK postcode parsing and location classification."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from ukgeotarget.exceptions import PostcodeInvalid

_OUTCODE = r"GIR|[A-Z]{1,2}\d{1,2}[A-Z]?"

_UK_POSTCODE_RE = re.compile(
    rf"^({_OUTCODE})\s*(\d[A-Z]{{2}})$",
    re.IGNORECASE,
)
_UK_OUTCODE_RE = re.compile(rf"^({_OUTCODE})$", re.IGNORECASE)


@dataclass(frozen=True)
class FullPostcode:
    """A complete postcode such as 'G64 1AB'."""

    outcode: str
    incode: str

    def __str__(self) -> str:
        return f"{self.outcode} {self.incode}"


@dataclass(frozen=True)
class BareOutcode:
    """A postcode district on its own, e.g. 'KA10'."""

    outcode: str


@dataclass(frozen=True)
class AreaText:
    """Anything else: a town, county or region name."""

    text: str


Location = FullPostcode | BareOutcode | AreaText


def clean(raw: str | None) -> str:
    """Trim and upper-case; ``None`` becomes the empty string."""
    if raw is None:
        return ""
    return str(raw).strip().upper()


def validate(raw: str) -> bool:
    """Return True if *raw* looks like a valid full UK postcode."""
    return bool(_UK_POSTCODE_RE.match(clean(raw)))


def normalise(raw: str) -> str:
    """
    Normalise to the canonical 'OUTCODE INCODE' format, e.g. 'g641ab' -> 'G64 1AB'.

    Raises PostcodeInvalid if the input is not a valid UK postcode.
    """
    parsed = parse(raw)
    if parsed is None:
        raise PostcodeInvalid(raw)
    return str(parsed)


def parse(raw: str | None) -> FullPostcode | None:
    """Split a full postcode into outcode and incode, or return None."""
    match = _UK_POSTCODE_RE.match(clean(raw))
    if match is None:
        return None
    return FullPostcode(outcode=match.group(1), incode=match.group(2))


def extract_outcode(raw: str | None) -> str | None:
    """Return the outcode of a full postcode, e.g. 'EH1 1BB' -> 'EH1'."""
    parsed = parse(raw)
    return parsed.outcode if parsed else None


def is_outcode(raw: str | None) -> bool:
    """Return True if *raw* is a bare outcode such as 'G64' or 'SW1A'."""
    return bool(_UK_OUTCODE_RE.match(clean(raw)))


def normalise_outcode(raw: object) -> str:
    """Canonical form used for every outcode comparison and output."""
    return str(raw).strip().upper()


def classify(raw: str | None) -> Location | None:
    """
    Decide how a free-form location string should be resolved.

    A full postcode is checked first so it always wins over the other
    readings. Empty input gives None.
    """
    text = clean(raw)
    if not text:
        return None
    full = parse(text)
    if full is not None:
        return full
    if is_outcode(text):
        return BareOutcode(outcode=text)
    return AreaText(text=text)


def canonical_outcodes(outcodes: Iterable[object]) -> tuple[str, ...]:
    """Trim, upper-case, drop blanks, dedupe and sort."""
    return tuple(sorted({normalise_outcode(o) for o in outcodes} - {""}))
