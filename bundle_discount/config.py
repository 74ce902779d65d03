"""
Configuration management for Bundle Discount
"""

import os
from dotenv import load_dotenv
import json
import yaml
from pathlib import Path
from typing import Any, Optional, TypeVar
from pydantic import BaseModel, Field, field_validator

from bundle_discount.constants import (
    BUNDLE_DISCOUNT_PERCENTAGE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MESSAGE_TEMPLATE,
    PATCHES_PER_BUNDLE,
)

DEFAULT_CONFIG_FILENAME = "bundle_discount.yaml"

T = TypeVar("T")


class BundleSettings(BaseModel):
    """Bundle rule and discount shape"""
    discount_percentage: float = Field(default=BUNDLE_DISCOUNT_PERCENTAGE, gt=0, le=100)
    patches_per_bundle: int = Field(default=PATCHES_PER_BUNDLE, ge=1)
    message_template: str = DEFAULT_MESSAGE_TEMPLATE

    @field_validator("message_template")
    @classmethod
    def _check_template(cls, value: str) -> str:
        """Only {percentage}, {label} and {bundle_count} may appear in the message."""
        try:
            value.format(percentage="20", label="1 bundle", bundle_count=1)
        except (AttributeError, KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"invalid message template placeholder: {exc}") from exc
        return value


class RuntimeSettings(BaseModel):
    """Runtime execution settings"""
    verbose: bool = False
    log_level: str = DEFAULT_LOG_LEVEL


class BundleDiscountConfig(BaseModel):
    """Main Bundle Discount configuration"""
    bundle: BundleSettings = Field(default_factory=BundleSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)

    @property
    def verbose(self) -> bool:
        return self.runtime.verbose


def load_config(config_path: Optional[Path] = None) -> BundleDiscountConfig:
    """
    Load configuration from YAML file or use defaults.

    Priority:
    1. Provided config_path
    2. ./bundle_discount.yaml
    3. ~/.bundle_discount/config.yaml
    4. Defaults

    BUNDLE_DISCOUNT_PERCENTAGE, BUNDLE_PATCHES_PER_BUNDLE and
    BUNDLE_DISCOUNT_VERBOSE (environment or .env) override the file.
    """
    config_data = {}

    # Load environment variables from .env (if present)
    load_dotenv()

    search_paths = []
    if config_path:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        search_paths.append(config_path)

    search_paths.extend([
        Path.cwd() / DEFAULT_CONFIG_FILENAME,
        Path.home() / ".bundle_discount" / "config.yaml",
    ])

    for path in search_paths:
        if path.exists():
            with open(path, "r") as f:
                if path.suffix in [".yaml", ".yml"]:
                    config_data = yaml.safe_load(f) or {}
                else:
                    config_data = json.load(f)
            break

    bundle = config_data.setdefault("bundle", {})
    runtime = config_data.setdefault("runtime", {})

    percentage = os.getenv("BUNDLE_DISCOUNT_PERCENTAGE")
    if percentage:
        bundle["discount_percentage"] = percentage
    patches = os.getenv("BUNDLE_PATCHES_PER_BUNDLE")
    if patches:
        bundle["patches_per_bundle"] = patches
    verbose = os.getenv("BUNDLE_DISCOUNT_VERBOSE")
    if verbose:
        runtime["verbose"] = verbose.lower() in ("1", "true", "yes")

    return BundleDiscountConfig(**config_data)


def save_config(config: BundleDiscountConfig, path: Optional[Path] = None):
    """Save configuration to YAML file."""
    if path is None:
        path = Path.home() / ".bundle_discount" / "config.yaml"

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def get_or_default(config: BundleDiscountConfig | None, path: str, default: T) -> T:
    """Get nested config value with fallback to a default."""
    if config is None:
        return default
    value: Any = config
    for part in path.split("."):
        value = getattr(value, part, None)
        if value is None:
            return default
    return value
