"""Decoding of the checkout pipeline's cart snapshot into line items."""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from bundle_discount.constants import MERCHANDISE_PRODUCT_VARIANT
from bundle_discount.errors import CartInputError
from bundle_discount.models import BundleRole, LineItem


class Metafield(BaseModel):
    """Single-valued product metafield (``custom.bundle_role``)"""
    value: Optional[Any] = None


class Product(BaseModel):
    bundle_role: Optional[Metafield] = Field(default=None, alias="bundleRole")

    class Config:
        populate_by_name = True


class Merchandise(BaseModel):
    """Merchandise behind a cart line; only product variants carry a product"""
    typename: Optional[str] = Field(default=None, alias="__typename")
    product: Optional[Product] = None

    class Config:
        populate_by_name = True


class CartLine(BaseModel):
    id: str
    quantity: int = Field(ge=0)
    merchandise: Optional[Merchandise] = None


class Cart(BaseModel):
    lines: list[CartLine] = Field(default_factory=list)


class CartInput(BaseModel):
    """Run input handed over by the checkout pipeline"""
    cart: Cart


def parse_cart_input(payload: Union[str, bytes, dict[str, Any], CartInput]) -> CartInput:
    """
    Validate a raw cart snapshot.

    Args:
        payload: JSON text, an already decoded dict, or a CartInput

    Returns:
        The validated CartInput

    Raises:
        json.JSONDecodeError: payload is text but not JSON
        CartInputError: payload is bytes but not UTF-8, or does not have the run input shape
    """
    if isinstance(payload, CartInput):
        return payload
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CartInputError(f"Cart input is not UTF-8 text: {exc.reason} at byte {exc.start}") from exc
    if isinstance(payload, str):
        payload = json.loads(payload)
    if not isinstance(payload, dict):
        raise CartInputError(f"Cart input must be a JSON object, got {type(payload).__name__}")
    try:
        return CartInput.model_validate(payload)
    except ValidationError as exc:
        raise CartInputError("Invalid cart input", errors=exc.errors()) from exc


def resolve_role(line: CartLine) -> BundleRole:
    """Role of a cart line; lines that do not resolve to a tagged product are NONE."""
    merchandise = line.merchandise
    if merchandise is None or merchandise.typename != MERCHANDISE_PRODUCT_VARIANT:
        return BundleRole.NONE
    if merchandise.product is None or merchandise.product.bundle_role is None:
        return BundleRole.NONE
    return BundleRole.from_tag(merchandise.product.bundle_role.value)


def to_line_items(cart_input: CartInput) -> list[LineItem]:
    """Line items in cart order, each with its resolved role."""
    return [
        LineItem(id=line.id, quantity=line.quantity, role=resolve_role(line))
        for line in cart_input.cart.lines
    ]
