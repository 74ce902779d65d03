"""Encoding of discount operations into the pricing engine's run result."""

from __future__ import annotations

from typing import Any, Sequence, Union

from bundle_discount.models import DiscountOperation, DiscountTarget


def _number(value: float) -> Union[int, float]:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _encode_target(target: DiscountTarget) -> dict[str, Any]:
    return {"cartLine": {"id": target.line_id, "quantity": target.quantity}}


def encode_operation(operation: DiscountOperation) -> dict[str, Any]:
    return {
        "productDiscountsAdd": {
            "candidates": [
                {
                    "message": operation.message,
                    "targets": [_encode_target(target) for target in operation.targets],
                    "value": {"percentage": {"value": _number(operation.percentage)}},
                }
            ],
            "selectionStrategy": operation.selection_strategy.value,
        }
    }


def to_run_result(operations: Sequence[DiscountOperation]) -> dict[str, Any]:
    """``{"operations": [...]}``; empty when no bundle applies."""
    return {"operations": [encode_operation(operation) for operation in operations]}
