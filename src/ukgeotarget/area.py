"""Area-name normalisation and substring pattern building."""

_WILDCARD = "%"
_ESCAPE = "\\"


def normalise(raw: str) -> str:
    """Upper-case and collapse whitespace."""
    return " ".join(raw.upper().split())


def escape_like(text: str) -> str:
    """Escape LIKE metacharacters so *text* matches literally."""
    return (
        text.replace(_ESCAPE, _ESCAPE * 2)
        .replace("%", _ESCAPE + "%")
        .replace("_", _ESCAPE + "_")
    )


def is_wrapped(text: str) -> bool:
    """True when the caller already supplied explicit wildcard markers."""
    return _WILDCARD in text


def contains_pattern(raw: str) -> str:
    """
    Build a case-insensitive LIKE pattern for "field contains *raw*".

    'Ayrshire' -> '%AYRSHIRE%'. A value that already carries '%' markers
    is used as given, only trimmed and upper-cased, rather than being
    wrapped again. Returns '' for blank input.
    """
    if is_wrapped(raw):
        return raw.strip().upper()
    text = normalise(raw)
    if not text:
        return ""
    return f"{_WILDCARD}{escape_like(text)}{_WILDCARD}"


def prefix_pattern(raw: str) -> str:
    """LIKE pattern for "starts with *raw*", e.g. 'g6' -> 'G6%'."""
    text = "".join(raw.upper().split())
    if not text:
        return ""
    return f"{escape_like(text)}{_WILDCARD}"
