"""Property-based tests using Hypothesis.

Invariants of location classification and serialization that must hold
for any input, not just the hand-picked examples.
"""

import json

from hypothesis import given
from hypothesis import strategies as st

from ukgeotarget.models import OutcodeStats
from ukgeotarget.postcode import AreaText, BareOutcode, FullPostcode, classify
from ukgeotarget.serializer import serialize

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

uk_outcodes = st.from_regex(r"[A-Z]{1,2}[0-9][0-9A-Z]?", fullmatch=True)
uk_incodes = st.from_regex(r"[0-9][A-Z]{2}", fullmatch=True)
separators = st.sampled_from(["", " ", "  ", "\t"])
words = st.from_regex(r"[A-Za-z][A-Za-z ]{2,30}", fullmatch=True)

measures = st.floats(min_value=0, max_value=1e6, allow_nan=False, allow_infinity=False)


@st.composite
def coverage_maps(draw, outcodes: list[str]) -> dict[str, OutcodeStats]:
    chosen = draw(st.lists(st.sampled_from(outcodes), unique=True)) if outcodes else []
    return {
        oc: OutcodeStats(oc, draw(measures), draw(measures), draw(measures), draw(measures))
        for oc in chosen
    }


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


class TestClassifyProperties:
    @given(uk_outcodes, uk_incodes, separators, st.booleans())
    def test_full_postcode_yields_its_outcode(
        self, outcode: str, incode: str, sep: str, lower: bool
    ) -> None:
        raw = f"{outcode}{sep}{incode}"
        parsed = classify(raw.lower() if lower else raw)
        assert parsed == FullPostcode(outcode=outcode, incode=incode)

    @given(uk_outcodes, st.booleans())
    def test_bare_outcode_is_itself(self, outcode: str, lower: bool) -> None:
        parsed = classify(f" {outcode.lower() if lower else outcode} ")
        assert parsed == BareOutcode(outcode=outcode)

    @given(words)
    def test_letters_only_is_area_text(self, text: str) -> None:
        assert isinstance(classify(text), AreaText)


# ---------------------------------------------------------------------------
# serialize
# ---------------------------------------------------------------------------


class TestSerializeProperties:
    @given(st.lists(uk_outcodes))
    def test_postal_codes_sorted_unique(self, outcodes: list[str]) -> None:
        result = serialize(outcodes, {})
        assert list(result.postal_codes) == sorted(set(outcodes))

    @given(st.lists(uk_outcodes))
    def test_meta_bulk_text_matches_postal_codes(self, outcodes: list[str]) -> None:
        result = serialize(outcodes, {})
        assert result.platform_serializations.meta_bulk_text == "\n".join(
            result.postal_codes
        )

    @given(st.data(), st.lists(uk_outcodes, min_size=1))
    def test_idempotent(self, data: st.DataObject, outcodes: list[str]) -> None:
        coverage = data.draw(coverage_maps(outcodes))
        first = json.dumps(serialize(outcodes, coverage).to_dict())
        second = json.dumps(serialize(outcodes, coverage).to_dict())
        assert first == second

    @given(st.data(), st.lists(uk_outcodes, min_size=1))
    def test_coverage_never_exceeds_postal_codes(
        self, data: st.DataObject, outcodes: list[str]
    ) -> None:
        coverage = data.draw(coverage_maps(outcodes))
        result = serialize(outcodes, coverage)
        assert {c.outcode for c in result.coverage} <= set(result.postal_codes)
        assert len(result.coverage) == len(coverage)
