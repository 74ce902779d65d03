"""Run entrypoint invoked once per cart evaluation."""

from __future__ import annotations

from typing import Any, Optional, Union

from bundle_discount.allocator import allocate, summarize
from bundle_discount.cart_input import CartInput, parse_cart_input, to_line_items
from bundle_discount.config import BundleSettings
from bundle_discount.models import BundleSummary, LineItem
from bundle_discount.result import to_run_result

RunPayload = Union[str, bytes, dict[str, Any], CartInput]


def cart_lines_discounts_generate_run(
    payload: RunPayload,
    settings: Optional[BundleSettings] = None,
) -> dict[str, Any]:
    """Decode the cart snapshot, allocate the bundle discount and encode the result."""
    lines = to_line_items(parse_cart_input(payload))
    return to_run_result(allocate(lines, settings))


def explain_cart(
    payload: RunPayload,
    settings: Optional[BundleSettings] = None,
) -> tuple[list[LineItem], BundleSummary]:
    """Decoded line items and the aggregates and claimed units for them, without building operations."""
    lines = to_line_items(parse_cart_input(payload))
    return lines, summarize(lines, settings)
