"""Tests for input normalization and coercion."""

import pytest

from catalog_admin.domain import (
    CoercionPolicy,
    InvalidIdentifier,
    QuantityOption,
    ValidationError,
    coerce_integer,
    coerce_number,
    normalize_name,
    normalize_subcategory,
    parse_bool,
    parse_quantity_options,
    require_number,
    validate_identifier,
)

PERMISSIVE = CoercionPolicy.PERMISSIVE
STRICT = CoercionPolicy.STRICT


# ============================================================================
# Names and Identifiers
# ============================================================================


class TestNormalizeName:
    """Tests for name normalization."""

    def test_trims_and_lowercases(self) -> None:
        """Names are stored trimmed and lowercased."""
        assert normalize_name("  Fresh Vegetables ") == "fresh vegetables"

    def test_none_is_empty(self) -> None:
        """Missing names normalize to an empty string."""
        assert normalize_name(None) == ""

    def test_is_idempotent(self) -> None:
        """Normalizing twice gives the same result."""
        once = normalize_name("  MiXeD ")
        assert normalize_name(once) == once


class TestNormalizeSubcategory:
    """Tests for subcategory normalization."""

    def test_plain_string(self) -> None:
        """Plain names are trimmed and lowercased."""
        assert normalize_subcategory(" Root ") == "root"

    def test_object_with_name(self) -> None:
        """Echoed {name} objects reduce to the bare name."""
        assert normalize_subcategory({"id": "x", "name": "Root"}) == "root"

    def test_string_and_object_agree(self) -> None:
        """Both input shapes give the same stored value."""
        assert normalize_subcategory("Leafy") == normalize_subcategory({"name": "Leafy"})

    def test_empty_values_are_none(self) -> None:
        """Empty input is stored as null."""
        assert normalize_subcategory(None) is None
        assert normalize_subcategory("   ") is None
        assert normalize_subcategory({}) is None


class TestValidateIdentifier:
    """Tests for identifier format validation."""

    def test_accepts_uuid(self) -> None:
        """Well-formed UUIDs are returned in canonical form."""
        value = "3F2504E0-4F89-11D3-9A0C-0305E82C3301"
        assert validate_identifier(value, "product") == value.lower()

    @pytest.mark.parametrize("value", ["123", "not-a-uuid", "", None, 42])
    def test_rejects_malformed(self, value) -> None:
        """Malformed identifiers raise InvalidIdentifier."""
        with pytest.raises(InvalidIdentifier) as exc_info:
            validate_identifier(value, "product")
        assert exc_info.value.message == "Invalid product ID format"
        assert exc_info.value.status_code == 400


# ============================================================================
# Booleans and Numbers
# ============================================================================


class TestParseBool:
    """Tests for boolean-like form values."""

    @pytest.mark.parametrize("value", ["true", True])
    def test_truthy(self, value) -> None:
        """Only "true" and True are truthy."""
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["false", "True", "1", "yes", 1, None, ""])
    def test_falsy(self, value) -> None:
        """Everything else is false."""
        assert parse_bool(value) is False


class TestRequireNumber:
    """Tests for required numeric fields."""

    def test_parses_string(self) -> None:
        """Form strings are parsed to floats."""
        assert require_number("12.5", "price") == 12.5

    def test_accepts_native_number(self) -> None:
        """JSON numbers are accepted as-is."""
        assert require_number(40, "price") == 40.0

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_is_rejected(self, value) -> None:
        """Absent values are a validation error."""
        with pytest.raises(ValidationError, match="price is required"):
            require_number(value, "price")

    @pytest.mark.parametrize("value", ["abc", "nan", "inf", True])
    def test_unparseable_is_rejected(self, value) -> None:
        """Unparseable and non-finite values are never stored."""
        with pytest.raises(ValidationError, match="price must be a number"):
            require_number(value, "price")

    def test_negative_is_rejected(self) -> None:
        """Negative values are rejected."""
        with pytest.raises(ValidationError, match="must not be negative"):
            require_number("-1", "price")


class TestCoerceNumber:
    """Tests for optional numeric fields."""

    def test_blank_uses_default(self) -> None:
        """Blank values use the default under both policies."""
        assert coerce_number("", "costPrice", PERMISSIVE) == 0
        assert coerce_number(None, "costPrice", STRICT) == 0

    def test_permissive_falls_back(self) -> None:
        """Permissive parsing turns garbage into the default."""
        assert coerce_number("abc", "costPrice", PERMISSIVE) == 0

    def test_strict_rejects(self) -> None:
        """Strict parsing rejects garbage."""
        with pytest.raises(ValidationError, match="costPrice must be a number"):
            coerce_number("abc", "costPrice", STRICT)

    def test_negative_rejected_under_both(self) -> None:
        """Negative values are rejected regardless of policy."""
        for policy in (PERMISSIVE, STRICT):
            with pytest.raises(ValidationError):
                coerce_number("-5", "salePrice", policy)


class TestCoerceInteger:
    """Tests for optional integer fields."""

    def test_parses_integer_string(self) -> None:
        """Integer strings are parsed."""
        assert coerce_integer("12", "stock", STRICT) == 12

    def test_permissive_truncates_fraction(self) -> None:
        """Permissive parsing truncates fractional input."""
        assert coerce_integer("3.7", "stock", PERMISSIVE) == 3

    def test_strict_rejects_fraction(self) -> None:
        """Strict parsing rejects fractional input."""
        with pytest.raises(ValidationError, match="stock must be an integer"):
            coerce_integer("3.7", "stock", STRICT)

    def test_permissive_garbage_is_default(self) -> None:
        """Permissive parsing turns garbage into the default."""
        assert coerce_integer("lots", "stock", PERMISSIVE) == 0

    def test_strict_garbage_is_rejected(self) -> None:
        """Strict parsing rejects garbage."""
        with pytest.raises(ValidationError):
            coerce_integer("lots", "stock", STRICT)

    @pytest.mark.parametrize("policy", [PERMISSIVE, STRICT])
    @pytest.mark.parametrize("value", [1e30, "1e30", 2**31])
    def test_out_of_range_is_rejected(self, value, policy) -> None:
        """Values beyond the 32-bit stock column are invalid under both policies."""
        with pytest.raises(ValidationError, match="stock must not exceed 2147483647"):
            coerce_integer(value, "stock", policy)

    def test_upper_bound_is_accepted(self) -> None:
        """The largest storable stock value is allowed."""
        assert coerce_integer(str(2**31 - 1), "stock", STRICT) == 2**31 - 1


# ============================================================================
# Quantity Options
# ============================================================================


class TestParseQuantityOptions:
    """Tests for custom quantity option parsing."""

    def test_json_string_and_list_are_equal(self) -> None:
        """JSON-encoded and structured input give the same options."""
        raw = [{"amount": "500", "unit": "g", "price": 22, "stock": 5}]
        from_json = parse_quantity_options(
            '[{"amount":"500","unit":"g","price":22,"stock":5}]', PERMISSIVE
        )
        from_list = parse_quantity_options(raw, PERMISSIVE)
        assert from_json == from_list
        assert from_json == [QuantityOption(amount="500", unit="g", price=22.0, stock=5)]

    def test_stock_defaults_to_zero(self) -> None:
        """Options without stock get 0."""
        options = parse_quantity_options([{"amount": "1", "unit": "kg", "price": "40"}], STRICT)
        assert options[0].stock == 0

    def test_preserves_order(self) -> None:
        """Options keep their input order."""
        options = parse_quantity_options(
            [
                {"amount": "250", "unit": "g", "price": 12},
                {"amount": "1", "unit": "kg", "price": 40},
            ],
            PERMISSIVE,
        )
        assert [o.amount for o in options] == ["250", "1"]

    @pytest.mark.parametrize("value", [None, "", "not json", '{"amount": "1"}', "42", 7])
    def test_malformed_input_is_empty(self, value) -> None:
        """Malformed JSON or non-list input yields no options."""
        assert parse_quantity_options(value, PERMISSIVE) == []

    def test_huge_option_stock_is_rejected(self) -> None:
        """Option stock shares the stock column bound."""
        with pytest.raises(ValidationError, match=r"customQuantityOptions\[0\]\.stock"):
            parse_quantity_options(
                [{"amount": "1", "unit": "kg", "price": 1, "stock": 1e30}], PERMISSIVE
            )

    def test_missing_unit_is_rejected(self) -> None:
        """Entries without a unit are invalid."""
        with pytest.raises(ValidationError, match=r"customQuantityOptions\[0\]\.unit"):
            parse_quantity_options([{"amount": "500", "price": 10}], PERMISSIVE)

    def test_bad_price_is_rejected(self) -> None:
        """Entries need a parseable price."""
        with pytest.raises(ValidationError, match=r"customQuantityOptions\[1\]\.price"):
            parse_quantity_options(
                [
                    {"amount": "500", "unit": "g", "price": 10},
                    {"amount": "1", "unit": "kg", "price": "free"},
                ],
                PERMISSIVE,
            )

    def test_non_object_entry_is_rejected(self) -> None:
        """Entries must be objects."""
        with pytest.raises(ValidationError, match="must be an object"):
            parse_quantity_options(["500g"], PERMISSIVE)
