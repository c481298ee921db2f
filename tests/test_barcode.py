"""Tests for scale barcode decoding."""

import pytest

from cheese_stock.domain.errors import (
    InvalidWeightError,
    LengthOrFormatError,
    UnknownProductError,
)
from cheese_stock.services.barcode import decode_barcode, parse_barcode
from tests.conftest import REGGIANITO, InMemoryCatalog, make_barcode


def test_parse_barcode_splits_fields() -> None:
    parsed = parse_barcode("0012345006507")

    assert parsed.prefix == "00"
    assert parsed.plu == "12345"
    assert parsed.weight_grams == 650
    assert parsed.check_digit == "7"


def test_parse_barcode_keeps_plu_leading_zeros() -> None:
    parsed = parse_barcode(make_barcode("00123", 1500))

    assert parsed.plu == "00123"
    assert parsed.weight_grams == 1500


@pytest.mark.parametrize(
    "code",
    ["", "001234500650", "00123450065001", "0012345006500X", " 0012345006500"],
)
def test_parse_barcode_rejects_wrong_length(code: str) -> None:
    with pytest.raises(LengthOrFormatError) as exc_info:
        parse_barcode(code)

    assert exc_info.value.context["length"] == len(code)


def test_parse_barcode_rejects_non_digits() -> None:
    with pytest.raises(LengthOrFormatError):
        parse_barcode("00123A5006500")


def test_parse_barcode_rejects_zero_weight() -> None:
    with pytest.raises(InvalidWeightError) as exc_info:
        parse_barcode(make_barcode("12345", 0))

    assert exc_info.value.context["weight"] == "00000"


def test_parse_barcode_ignores_check_digit() -> None:
    first = parse_barcode(make_barcode("12345", 650, check="0"))
    second = parse_barcode(make_barcode("12345", 650, check="9"))

    assert first.weight_grams == second.weight_grams
    assert first.plu == second.plu


def test_decode_barcode_resolves_product() -> None:
    catalog = InMemoryCatalog()

    decoded = decode_barcode("0012345006500", catalog)

    assert decoded.product == REGGIANITO
    assert decoded.weight_grams == 650
    assert catalog.lookups == ["12345"]


def test_decode_barcode_unknown_plu() -> None:
    catalog = InMemoryCatalog()

    with pytest.raises(UnknownProductError) as exc_info:
        decode_barcode(make_barcode("99999", 650), catalog)

    assert exc_info.value.plu == "99999"
    assert exc_info.value.to_dict()["code"] == "UNKNOWN_PRODUCT"


def test_decode_barcode_skips_catalog_on_format_error() -> None:
    catalog = InMemoryCatalog()

    with pytest.raises(LengthOrFormatError):
        decode_barcode("123", catalog)

    assert catalog.lookups == []


def test_decode_barcode_is_deterministic() -> None:
    catalog = InMemoryCatalog()
    code = make_barcode("04567", 2310)

    assert decode_barcode(code, catalog) == decode_barcode(code, catalog)


@pytest.mark.parametrize("code", [None, 12345006500, b"0012345006500"])
def test_parse_barcode_rejects_non_string(code: object) -> None:
    with pytest.raises(LengthOrFormatError):
        parse_barcode(code)  # type: ignore[arg-type]
