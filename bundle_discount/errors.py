"""Structured error classification."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from bundle_discount.constants import EXIT_CONFIG_ERROR, EXIT_INPUT_ERROR


class CartInputError(ValueError):
    """Raised when a cart snapshot does not have the run input shape."""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(self.message)


class ErrorCategory(Enum):
    INPUT = "input"
    VALIDATION = "validation"
    CONFIGURATION = "config"
    IO = "io"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BundleDiscountError:
    category: ErrorCategory
    message: str
    exit_code: int = EXIT_INPUT_ERROR
    hint: str = ""
    original_exception: Optional[Exception] = None

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "message": self.message,
            "exit_code": self.exit_code,
            "hint": self.hint,
        }


def _format_pydantic_errors(errors: list[dict[str, Any]]) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid value')}" if location else error.get("msg", ""))
    return "; ".join(parts)


def classify_exception(exception: Exception) -> BundleDiscountError:
    if isinstance(exception, CartInputError):
        details = _format_pydantic_errors(exception.errors)
        message = f"{exception.message}: {details}" if details else exception.message
        return BundleDiscountError(
            category=ErrorCategory.INPUT,
            message=message,
            exit_code=EXIT_INPUT_ERROR,
            hint="Expected {\"cart\": {\"lines\": [...]}} with an id and quantity on every line.",
            original_exception=exception,
        )
    if isinstance(exception, json.JSONDecodeError):
        return BundleDiscountError(
            category=ErrorCategory.INPUT,
            message=f"Cart input is not valid JSON: {exception.msg} (line {exception.lineno})",
            exit_code=EXIT_INPUT_ERROR,
            original_exception=exception,
        )
    if isinstance(exception, UnicodeDecodeError):
        return BundleDiscountError(
            category=ErrorCategory.INPUT,
            message=f"Cart input is not UTF-8 text: {exception.reason} at byte {exception.start}",
            exit_code=EXIT_INPUT_ERROR,
            original_exception=exception,
        )
    if isinstance(exception, ValidationError):
        return BundleDiscountError(
            category=ErrorCategory.VALIDATION,
            message=_format_pydantic_errors(exception.errors()),
            exit_code=EXIT_CONFIG_ERROR,
            hint="Check the bundle settings in the config file and BUNDLE_* environment variables.",
            original_exception=exception,
        )
    if isinstance(exception, yaml.YAMLError):
        return BundleDiscountError(
            category=ErrorCategory.CONFIGURATION,
            message=f"Config file could not be parsed: {exception}",
            exit_code=EXIT_CONFIG_ERROR,
            original_exception=exception,
        )
    if isinstance(exception, OSError):
        return BundleDiscountError(
            category=ErrorCategory.IO,
            message=str(exception),
            exit_code=EXIT_CONFIG_ERROR,
            original_exception=exception,
        )

    return BundleDiscountError(
        category=ErrorCategory.UNKNOWN,
        message=str(exception),
        exit_code=EXIT_INPUT_ERROR,
        original_exception=exception,
    )
