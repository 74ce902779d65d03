"""
Bundle detection and discount allocation.

A bundle is one core unit plus ``patches_per_bundle`` patch units. The cart
supports ``min(core_total, patch_total // patches_per_bundle)`` bundles; the
discounted units are claimed first-fit, earlier cart lines saturated before
later ones, core targets ahead of patch targets.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from bundle_discount.config import BundleSettings
from bundle_discount.constants import CORES_PER_BUNDLE, LOG_PREFIX
from bundle_discount.models import (
    BundleRole,
    BundleSummary,
    DiscountOperation,
    DiscountTarget,
    LineItem,
)

logger = logging.getLogger(__name__)


def compute_bundle_count(core_total: int, patch_total: int, patches_per_bundle: int) -> int:
    """Number of complete bundles; leftover patches never form part of one."""
    return min(core_total // CORES_PER_BUNDLE, patch_total // patches_per_bundle)


def bundle_label(bundle_count: int) -> str:
    return "1 bundle" if bundle_count == 1 else f"{bundle_count} bundles"


def format_percentage(percentage: float) -> str:
    return f"{percentage:g}"


def classify_lines(lines: Iterable[LineItem]) -> tuple[list[LineItem], list[LineItem]]:
    """Split lines into (core, patch), keeping cart order and dropping untagged lines."""
    core_lines: list[LineItem] = []
    patch_lines: list[LineItem] = []
    for line in lines:
        if line.role is BundleRole.CORE:
            core_lines.append(line)
        elif line.role is BundleRole.PATCH:
            patch_lines.append(line)
    return core_lines, patch_lines


def _claim_units(lines: Sequence[LineItem], units: int, role: BundleRole) -> list[DiscountTarget]:
    targets: list[DiscountTarget] = []
    remaining = units
    for line in lines:
        if remaining <= 0:
            break
        quantity = min(line.quantity, remaining)
        if quantity <= 0:
            continue
        targets.append(DiscountTarget(line_id=line.id, quantity=quantity))
        remaining -= quantity
        logger.debug("%s targeting %s line %s qty=%d", LOG_PREFIX, role.value, line.id, quantity)
    return targets


def summarize(lines: Sequence[LineItem], settings: Optional[BundleSettings] = None) -> BundleSummary:
    """Aggregate the cart and decide which units are discounted."""
    settings = settings or BundleSettings()
    core_lines, patch_lines = classify_lines(lines)

    core_total = sum(line.quantity for line in core_lines)
    patch_total = sum(line.quantity for line in patch_lines)
    logger.debug("%s cores=%d, patches=%d", LOG_PREFIX, core_total, patch_total)

    bundle_count = compute_bundle_count(core_total, patch_total, settings.patches_per_bundle)
    logger.debug("%s bundleCount=%d", LOG_PREFIX, bundle_count)

    summary = BundleSummary(core_total=core_total, patch_total=patch_total, bundle_count=bundle_count)
    if bundle_count == 0:
        return summary

    summary.core_targets = _claim_units(core_lines, bundle_count * CORES_PER_BUNDLE, BundleRole.CORE)
    summary.patch_targets = _claim_units(
        patch_lines, bundle_count * settings.patches_per_bundle, BundleRole.PATCH
    )
    return summary


def allocate(lines: Sequence[LineItem], settings: Optional[BundleSettings] = None) -> list[DiscountOperation]:
    """
    Discount operations for a cart.

    Args:
        lines: Cart line items in cart order
        settings: Bundle rule; defaults to 20% off per core + 3 patches

    Returns:
        An empty list when the cart holds no complete bundle, otherwise exactly
        one operation covering every bundled unit
    """
    if not lines:
        return []

    settings = settings or BundleSettings()
    summary = summarize(lines, settings)
    if not summary.has_bundle:
        return []

    message = settings.message_template.format(
        percentage=format_percentage(settings.discount_percentage),
        label=bundle_label(summary.bundle_count),
        bundle_count=summary.bundle_count,
    )
    return [
        DiscountOperation(
            message=message,
            percentage=settings.discount_percentage,
            targets=tuple(summary.targets),
        )
    ]
