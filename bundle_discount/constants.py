"""
Shared constants for Bundle Discount.
"""

# Bundle rule
BUNDLE_DISCOUNT_PERCENTAGE = 20
CORES_PER_BUNDLE = 1
PATCHES_PER_BUNDLE = 3

# Role tags (values of the product metafield)
ROLE_CORE = "core"
ROLE_PATCH = "patch"
ROLE_METAFIELD_NAMESPACE = "custom"
ROLE_METAFIELD_KEY = "bundle_role"

# Cart input
MERCHANDISE_PRODUCT_VARIANT = "ProductVariant"

# Run result
SELECTION_STRATEGY_FIRST = "FIRST"
DEFAULT_MESSAGE_TEMPLATE = "Bundle {percentage}% Off ({label})"

# Campaign registered on the admin side
DISCOUNT_TITLE = "Bundle 20% (Core + 3 Patches)"

LOG_PREFIX = "[bundle-discount]"
DEFAULT_LOG_LEVEL = "WARNING"

# CLI exit codes
EXIT_INPUT_ERROR = 1
EXIT_CONFIG_ERROR = 2
