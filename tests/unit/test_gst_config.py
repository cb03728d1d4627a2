"""
Unit Tests for GST Configuration, State Codes and Input Validation
"""

import pytest
from decimal import Decimal

from retail_pos.core.exceptions import (
    InvalidHSNCodeError,
    InvalidStateError,
    InvalidTaxRateError,
)
from retail_pos.core.gst_config import (
    HSN_RATE_TABLE,
    GSTRate,
    get_all_gst_rates,
    get_default_gst_rate,
    get_hsn_entry,
)
from retail_pos.core.money import round_currency, to_decimal
from retail_pos.core.states import StateCode, resolve_state_code
from retail_pos.core.validation import (
    require_hsn_code,
    validate_hsn_code,
    validate_tax_rate,
)


# ============================================================================
# TEST: GST Configuration
# ============================================================================

class TestGSTConfig:
    """Tests for GST slabs and the HSN rate table"""

    @pytest.mark.unit
    def test_all_gst_rates_are_valid(self):
        """Verify the slab list matches Indian GST slabs"""
        assert get_all_gst_rates() == [
            Decimal("0"), Decimal("5"), Decimal("12"),
            Decimal("18"), Decimal("28"), Decimal("40")
        ]

    @pytest.mark.unit
    def test_default_gst_rate(self):
        """Verify default GST rate is 18%"""
        default = get_default_gst_rate()
        assert default == GSTRate.EIGHTEEN
        assert default.value == Decimal("18")

    @pytest.mark.unit
    def test_table_codes_are_valid_hsn(self):
        """Every table key is a valid HSN code and matches its entry"""
        for code, entry in HSN_RATE_TABLE.items():
            assert validate_hsn_code(code), code
            assert entry.hsn_code == code


class TestHSNLookup:
    """Tests for exact HSN lookup"""

    @pytest.mark.unit
    def test_hsn_lookup_tea(self):
        """Tea (0902) is 5%"""
        assert get_hsn_entry("0902").gst_rate == GSTRate.FIVE

    @pytest.mark.unit
    def test_hsn_lookup_fresh_vegetables(self):
        """Tomatoes (0702) are nil-rated"""
        assert get_hsn_entry("0702").rate == Decimal("0")

    @pytest.mark.unit
    def test_hsn_lookup_aerated_drinks_carry_cess(self):
        """Aerated drinks (2202) are 28% plus cess"""
        entry = get_hsn_entry("2202")
        assert entry.gst_rate == GSTRate.TWENTY_EIGHT
        assert entry.cess_rate > 0

    @pytest.mark.unit
    def test_hsn_lookup_luxury_slab(self):
        """Jewellery (7113) is in the 40% slab"""
        assert get_hsn_entry("7113").rate == Decimal("40")

    @pytest.mark.unit
    def test_hsn_lookup_strips_whitespace(self):
        assert get_hsn_entry(" 09 02 ").hsn_code == "0902"

    @pytest.mark.unit
    def test_hsn_lookup_unknown_code(self):
        """Unknown and empty codes return None"""
        assert get_hsn_entry("9999") is None
        assert get_hsn_entry("") is None
        assert get_hsn_entry(None) is None

    @pytest.mark.unit
    def test_hsn_lookup_is_exact(self):
        """An 8-digit code does not fall back to its 4-digit heading"""
        assert get_hsn_entry("09021010") is None


# ============================================================================
# TEST: Validation
# ============================================================================

class TestValidation:
    """Tests for upstream rate and HSN validation"""

    @pytest.mark.unit
    @pytest.mark.parametrize("code", ["0902", "090210", "09021010", "0902 10"])
    def test_valid_hsn_codes(self, code):
        assert validate_hsn_code(code) is True

    @pytest.mark.unit
    @pytest.mark.parametrize("code", ["", "090", "09021", "ABCD", "0902101010"])
    def test_invalid_hsn_codes(self, code):
        assert validate_hsn_code(code) is False

    @pytest.mark.unit
    def test_require_hsn_code_raises(self):
        with pytest.raises(InvalidHSNCodeError) as exc_info:
            require_hsn_code("12AB")
        assert exc_info.value.error_code == "INVALID_HSN_CODE"
        assert exc_info.value.status_code == 400

    @pytest.mark.unit
    @pytest.mark.parametrize("rate,expected", [
        (0, Decimal("0")),
        (18, Decimal("18")),
        ("12.5", Decimal("12.5")),
        (0.1, Decimal("0.1")),
        (100, Decimal("100")),
    ])
    def test_valid_tax_rates(self, rate, expected):
        assert validate_tax_rate(rate) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("rate", [-1, "100.01", "eighteen", None, True, "NaN", "Infinity"])
    def test_invalid_tax_rates(self, rate):
        """Non-numeric and out-of-range rates are configuration errors"""
        with pytest.raises(InvalidTaxRateError) as exc_info:
            validate_tax_rate(rate)
        assert exc_info.value.error_code == "INVALID_TAX_RATE"


class TestMoney:
    """Tests for Decimal helpers"""

    @pytest.mark.unit
    def test_float_converts_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.unit
    def test_round_half_up(self):
        assert round_currency(Decimal("2.345")) == Decimal("2.35")
        assert round_currency(Decimal("-2.345")) == Decimal("-2.35")
        assert round_currency(Decimal("2.344")) == Decimal("2.34")

    @pytest.mark.unit
    def test_round_to_places(self):
        assert round_currency(Decimal("10"), 2) == Decimal("10.00")
        assert str(round_currency(Decimal("10"), 2)) == "10.00"


# ============================================================================
# TEST: State Codes
# ============================================================================

class TestStateCodes:
    """Tests for resolving supplier/buyer states"""

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["27", 27, "Maharashtra", "  MAHARASHTRA ", "maharashtra"])
    def test_resolves_code_and_name(self, value):
        assert resolve_state_code(value) == StateCode.MAHARASHTRA

    @pytest.mark.unit
    def test_single_digit_code_is_padded(self):
        assert resolve_state_code("7") == StateCode.DELHI

    @pytest.mark.unit
    def test_aliases(self):
        assert resolve_state_code("Orissa") == StateCode.ODISHA
        assert resolve_state_code("new delhi") == StateCode.DELHI

    @pytest.mark.unit
    def test_multi_word_names(self):
        assert resolve_state_code("tamil   nadu") == StateCode.TAMIL_NADU

    @pytest.mark.unit
    def test_empty_is_none(self):
        assert resolve_state_code(None) is None
        assert resolve_state_code("  ") is None

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["Atlantis", "99", "25", True])
    def test_unknown_state_raises(self, value):
        with pytest.raises(InvalidStateError):
            resolve_state_code(value)

    @pytest.mark.unit
    def test_display_name(self):
        assert StateCode.TAMIL_NADU.display_name == "Tamil Nadu"
