"""Cart and discount types shared by the allocator and the run entrypoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from bundle_discount.constants import ROLE_CORE, ROLE_PATCH, SELECTION_STRATEGY_FIRST


class BundleRole(Enum):
    """Role a cart line plays in a bundle."""

    CORE = ROLE_CORE
    PATCH = ROLE_PATCH
    NONE = "none"

    @classmethod
    def from_tag(cls, value: Any) -> "BundleRole":
        """Map a raw metafield value to a role; anything unrecognized is NONE."""
        if value == ROLE_CORE:
            return cls.CORE
        if value == ROLE_PATCH:
            return cls.PATCH
        return cls.NONE


class SelectionStrategy(Enum):
    """How the pricing engine picks among competing discount candidates."""

    FIRST = SELECTION_STRATEGY_FIRST


@dataclass(frozen=True)
class LineItem:
    id: str
    quantity: int
    role: BundleRole = BundleRole.NONE


@dataclass(frozen=True)
class DiscountTarget:
    line_id: str
    quantity: int


@dataclass(frozen=True)
class DiscountOperation:
    """A single product discount the pricing engine applies verbatim."""

    message: str
    percentage: float
    targets: tuple[DiscountTarget, ...]
    selection_strategy: SelectionStrategy = SelectionStrategy.FIRST

    def claimed_quantity(self, line_id: str) -> int:
        return sum(target.quantity for target in self.targets if target.line_id == line_id)


@dataclass
class BundleSummary:
    """Intermediate aggregates of one allocation, kept for diagnostics."""

    core_total: int
    patch_total: int
    bundle_count: int
    core_targets: list[DiscountTarget] = field(default_factory=list)
    patch_targets: list[DiscountTarget] = field(default_factory=list)

    @property
    def targets(self) -> list[DiscountTarget]:
        """Core targets first, then patch targets, each in allocation order."""
        return self.core_targets + self.patch_targets

    @property
    def has_bundle(self) -> bool:
        return self.bundle_count >= 1
