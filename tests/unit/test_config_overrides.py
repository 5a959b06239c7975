"""Unit tests for the environment override engine."""

from __future__ import annotations

import datetime as dt

import pytest

from k8s_tester.addons import JobsPiConfig
from k8s_tester.config.errors import (
    ReadOnlyViolationError,
    TypeCoercionError,
    UnsupportedFieldKindError,
)
from k8s_tester.config.overrides import (
    apply_overrides,
    collect_overrides,
    record_overrides,
)
from tests.records import PREFIX, SampleRecord


def _apply(**env: str) -> SampleRecord:
    record = SampleRecord()
    apply_overrides(PREFIX, record, {f"{PREFIX}{k}": v for k, v in env.items()})
    return record


class TestPrimitiveKinds:
    """Each primitive kind is coerced from its string form."""

    def test_string_is_verbatim(self) -> None:
        """Strings are copied without trimming."""
        assert _apply(NAME=" spaced value ").name == " spaced value "

    @pytest.mark.parametrize("raw", ["1", "t", "T", "TRUE", "true", "True"])
    def test_bool_true_literals(self, raw: str) -> None:
        """Accepted true spellings set the flag."""
        assert _apply(ENABLED=raw).enabled is True, f"{raw!r} should parse as True."

    @pytest.mark.parametrize("raw", ["0", "f", "F", "FALSE", "false", "False"])
    def test_bool_false_literals(self, raw: str) -> None:
        """Accepted false spellings clear the flag."""
        record = SampleRecord(enabled=True)
        apply_overrides(PREFIX, record, {f"{PREFIX}ENABLED": raw})
        assert record.enabled is False, f"{raw!r} should parse as False."

    @pytest.mark.parametrize("raw", ["yes", "on", "tRuE", "2"])
    def test_bool_rejects_other_literals(self, raw: str) -> None:
        """Anything outside the strict set is a coercion error."""
        with pytest.raises(TypeCoercionError):
            _apply(ENABLED=raw)

    @pytest.mark.parametrize(("raw", "expected"), [("42", 42), ("-7", -7), ("+3", 3)])
    def test_int(self, raw: str, expected: int) -> None:
        """Signed base-10 integers are accepted."""
        assert _apply(COUNT=raw).count == expected

    @pytest.mark.parametrize("raw", ["abc", "1.5", " 1", "1_000", "0x10", "9" * 20])
    def test_int_rejects_malformed(self, raw: str) -> None:
        """Malformed or out-of-range integers fail."""
        with pytest.raises(TypeCoercionError):
            _apply(COUNT=raw)

    def test_uint(self) -> None:
        """Unsigned fields accept non-negative literals."""
        assert _apply(SIZE="18446744073709551615").size == 2**64 - 1

    @pytest.mark.parametrize("raw", ["-1", "+1", "18446744073709551616"])
    def test_uint_rejects_signed_or_overflow(self, raw: str) -> None:
        """Signs and values beyond 64 bits are rejected."""
        with pytest.raises(TypeCoercionError):
            _apply(SIZE=raw)

    def test_float(self) -> None:
        """Floats parse in base 10."""
        assert _apply(RATIO="0.25").ratio == pytest.approx(0.25)

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1e3", 1000.0), ("-.5", -0.5), ("+2.", 2.0), ("Inf", float("inf"))],
    )
    def test_float_literal_forms(self, raw: str, expected: float) -> None:
        """Exponents, bare fractions and infinity spellings are accepted."""
        assert _apply(RATIO=raw).ratio == expected

    @pytest.mark.parametrize(
        "raw", ["abc", " 1.0", "1.0 ", "1_5", "\u0661\u0662", "0x1p3", "."]
    )
    def test_float_rejects_malformed(self, raw: str) -> None:
        """Malformed floats fail."""
        with pytest.raises(TypeCoercionError):
            _apply(RATIO=raw)

    def test_duration(self) -> None:
        """Duration fields use unit literals."""
        assert _apply(TIMEOUT="5m").timeout == dt.timedelta(minutes=5)

    def test_duration_rejects_bare_integer(self) -> None:
        """A duration without a unit is a coercion error."""
        with pytest.raises(TypeCoercionError):
            _apply(TIMEOUT="300")

    def test_string_list_splits_on_commas(self) -> None:
        """Lists split on commas without trimming items."""
        assert _apply(ITEMS="a,b, c").items == ["a", "b", " c"]

    def test_string_list_single_item(self) -> None:
        """A value without commas becomes a single-item list."""
        assert _apply(ITEMS="solo").items == ["solo"]

    def test_optional_string(self) -> None:
        """Optional strings are overridable."""
        assert _apply(NOTE="hello").note == "hello"

    def test_renamed_field(self) -> None:
        """Dash keys are addressed with underscores."""
        assert _apply(RENAMED_KEY="value").renamed == "value"


class TestMappingFields:
    """Mapping overrides are JSON objects restricted to a whitelist."""

    def test_whitelisted_map(self) -> None:
        """Whitelisted maps are replaced by the decoded JSON object."""
        record = _apply(TAGS='{"team": "infra", "env": "ci"}')
        assert record.tags == {"team": "infra", "env": "ci"}

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"a": 1}'])
    def test_whitelisted_map_rejects_bad_json(self, raw: str) -> None:
        """Invalid JSON or non-string values fail coercion."""
        with pytest.raises(TypeCoercionError) as excinfo:
            _apply(TAGS=raw)
        assert excinfo.value.env_name == f"{PREFIX}TAGS"

    def test_non_whitelisted_map(self) -> None:
        """Maps outside the whitelist cannot be overridden."""
        with pytest.raises(UnsupportedFieldKindError) as excinfo:
            _apply(LABELS='{"a": "b"}')
        assert excinfo.value.field_name == "labels"

    def test_non_whitelisted_map_unset_is_fine(self) -> None:
        """The whitelist only matters when the variable is set."""
        assert _apply().labels == {}


class TestOverridePolicy:
    """Non-clobbering, read-only and error propagation rules."""

    def test_unset_variables_leave_values(self) -> None:
        """Without variables the record is untouched."""
        assert _apply() == SampleRecord()

    def test_empty_values_never_clobber(self) -> None:
        """Empty strings are treated as unset."""
        record = _apply(NAME="", ITEMS="", COUNT="")
        assert record == SampleRecord()

    def test_read_only_field_rejected(self) -> None:
        """Setting a read-only field is a hard failure naming the variable."""
        record = SampleRecord()
        env = {f"{PREFIX}ENDPOINT": "elsewhere"}

        with pytest.raises(ReadOnlyViolationError) as excinfo:
            apply_overrides(PREFIX, record, env)

        assert excinfo.value.env_name == f"{PREFIX}ENDPOINT"
        assert record.endpoint == "computed", "Read-only field must stay unchanged."

    def test_composite_fields_are_skipped(self) -> None:
        """Nested records and non-string lists are not overridable."""
        record = _apply(NESTED="anything", COUNTS="1,2")
        assert record.nested == JobsPiConfig()
        assert record.counts == []

    def test_first_error_stops_the_pass(self) -> None:
        """Fields before the failure keep new values; later ones are untouched."""
        record = SampleRecord()
        env = {
            f"{PREFIX}NAME": "changed",
            f"{PREFIX}COUNT": "abc",
            f"{PREFIX}RATIO": "0.9",
        }

        with pytest.raises(TypeCoercionError) as excinfo:
            apply_overrides(PREFIX, record, env)

        assert excinfo.value.env_name == f"{PREFIX}COUNT"
        assert excinfo.value.field_name == "count"
        assert excinfo.value.value == "abc"
        assert record.name == "changed"
        assert record.ratio == pytest.approx(0.5)

    def test_apply_returns_same_instance(self) -> None:
        """Overrides mutate the caller's record rather than a copy."""
        record = SampleRecord()
        assert apply_overrides(PREFIX, record, {f"{PREFIX}NAME": "x"}) is record

    def test_collect_does_not_mutate(self) -> None:
        """Collecting overrides is a dry run."""
        record = SampleRecord()
        overrides = list(
            collect_overrides(PREFIX, record, {f"{PREFIX}COUNT": "9"})
        )

        assert [(o.env_name, o.value) for o in overrides] == [(f"{PREFIX}COUNT", 9)]
        assert record.count == 1

    def test_record_overrides_reports_applied(self) -> None:
        """record_overrides returns every applied override in field order."""
        record = SampleRecord()
        env = {f"{PREFIX}RATIO": "0.1", f"{PREFIX}NAME": "n"}

        applied = record_overrides(PREFIX, record, env)

        assert [o.field.name for o in applied] == ["name", "ratio"]

    def test_reads_process_environment_by_default(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Without an explicit mapping, os.environ is consulted."""
        monkeypatch.setenv(f"{PREFIX}COUNT", "11")
        record = SampleRecord()
        apply_overrides(PREFIX, record)
        assert record.count == 11

    def test_idempotent(self) -> None:
        """Applying the same environment twice equals applying it once."""
        env = {f"{PREFIX}NAME": "n", f"{PREFIX}ITEMS": "a,b", f"{PREFIX}SIZE": "4"}
        once = apply_overrides(PREFIX, SampleRecord(), env)
        twice = SampleRecord()
        apply_overrides(PREFIX, twice, env)
        apply_overrides(PREFIX, twice, env)
        assert once == twice


def test_addon_integer_field_error_names_variable() -> None:
    """A malformed add-on integer reports the full variable name."""
    env = {"K8S_TESTER_JOBS_PI_COMPLETES": "abc"}

    with pytest.raises(TypeCoercionError, match="K8S_TESTER_JOBS_PI_COMPLETES"):
        apply_overrides("K8S_TESTER_JOBS_PI_", JobsPiConfig(), env)
