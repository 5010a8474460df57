import pytest

from nodeinventory.core.converters import (
    UINT32_BITS,
    format_bool,
    format_float,
    format_uint,
    parse_bool,
    parse_float,
    parse_uint,
)
from nodeinventory.core.errors import HardwareDecodeError, MalformedFieldError


@pytest.mark.unit
class TestParseUint:
    def test_parses_decimal_digits(self):
        assert parse_uint("k", "0") == 0
        assert parse_uint("k", "18446744073709551615") == 2**64 - 1
        assert parse_uint("k", "007") == 7

    @pytest.mark.parametrize("text", ["", " 1", "1 ", "-1", "+1", "1_000", "0x10", "1.0", "abc"])
    def test_rejects_non_digit_input(self, text):
        with pytest.raises(MalformedFieldError) as excinfo:
            parse_uint("/n/cpu/0/bits", text)

        assert excinfo.value.key == "/n/cpu/0/bits"
        assert excinfo.value.value == text

    def test_enforces_width(self):
        assert parse_uint("k", "4294967295", UINT32_BITS) == 2**32 - 1
        with pytest.raises(MalformedFieldError, match="out of range"):
            parse_uint("k", "4294967296", UINT32_BITS)
        with pytest.raises(MalformedFieldError):
            parse_uint("k", "18446744073709551616")


@pytest.mark.unit
class TestParseFloat:
    @pytest.mark.parametrize("text, expected", [("2400", 2400.0), ("2400.125", 2400.125), ("1e3", 1000.0)])
    def test_parses_decimal_floats(self, text, expected):
        assert parse_float("k", text) == expected

    @pytest.mark.parametrize("text", ["", " 1.5", "1.5 ", "1_0.5", "fast"])
    def test_rejects_invalid_floats(self, text):
        with pytest.raises(MalformedFieldError):
            parse_float("k", text)


@pytest.mark.unit
class TestParseBool:
    @pytest.mark.parametrize("text", ["1", "t", "T", "TRUE", "true", "True"])
    def test_true_spellings(self, text):
        assert parse_bool("k", text) is True

    @pytest.mark.parametrize("text", ["0", "f", "F", "FALSE", "false", "False"])
    def test_false_spellings(self, text):
        assert parse_bool("k", text) is False

    @pytest.mark.parametrize("text", ["", "yes", "no", "2"])
    def test_rejects_other_values(self, text):
        with pytest.raises(MalformedFieldError):
            parse_bool("k", text)


def test_malformed_field_error_is_a_decode_error():
    assert issubclass(MalformedFieldError, HardwareDecodeError)
    assert issubclass(MalformedFieldError, ValueError)


def test_formatters_produce_parseable_text():
    assert parse_uint("k", format_uint(123456789012)) == 123456789012
    assert parse_float("k", format_float(2394.998)) == 2394.998
    assert parse_float("k", format_float(0.1 + 0.2)) == 0.1 + 0.2
    assert format_bool(True) == "true"
    assert format_bool(False) == "false"
