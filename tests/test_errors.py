import json

import pytest
import yaml
from pydantic import ValidationError

from bundle_discount.config import BundleSettings
from bundle_discount.errors import CartInputError, ErrorCategory, classify_exception


def test_cart_input_error_lists_locations():
    exc = CartInputError(
        "Invalid cart input",
        errors=[{"loc": ("cart", "lines", 0, "quantity"), "msg": "Input should be greater than or equal to 0"}],
    )
    error = classify_exception(exc)
    assert error.category is ErrorCategory.INPUT
    assert error.exit_code == 1
    assert "cart.lines.0.quantity: Input should be greater than or equal to 0" in error.message
    assert error.hint


def test_json_decode_error():
    with pytest.raises(json.JSONDecodeError) as excinfo:
        json.loads("{oops")
    error = classify_exception(excinfo.value)
    assert error.category is ErrorCategory.INPUT
    assert error.message.startswith("Cart input is not valid JSON")


def test_validation_error():
    with pytest.raises(ValidationError) as excinfo:
        BundleSettings(patches_per_bundle=0)
    error = classify_exception(excinfo.value)
    assert error.category is ErrorCategory.VALIDATION
    assert error.exit_code == 2
    assert "patches_per_bundle" in error.message


def test_yaml_error():
    with pytest.raises(yaml.YAMLError) as excinfo:
        yaml.safe_load("bundle: [unclosed")
    assert classify_exception(excinfo.value).category is ErrorCategory.CONFIGURATION


def test_os_error():
    error = classify_exception(FileNotFoundError("cart.json"))
    assert error.category is ErrorCategory.IO
    assert error.exit_code == 2


def test_unknown_error_to_dict():
    error = classify_exception(RuntimeError("boom"))
    assert error.to_dict() == {
        "category": "unknown",
        "message": "boom",
        "exit_code": 1,
        "hint": "",
    }


def test_unicode_decode_error_is_input():
    with pytest.raises(UnicodeDecodeError) as excinfo:
        b"\xff\xfe{}".decode("utf-8")
    error = classify_exception(excinfo.value)
    assert error.category is ErrorCategory.INPUT
    assert error.exit_code == 1
    assert error.message.startswith("Cart input is not UTF-8 text")
