"""
Bundle Discount - automatic "core + 3 patches" cart discount

Given a cart snapshot whose lines are tagged through the product metafield
``custom.bundle_role``, computes how many complete bundles the cart holds and
emits the product discount instructions the checkout pricing engine applies:
- one ``core`` unit plus three ``patch`` units form a bundle
- every unit taking part in a bundle gets a flat 20% off
"""

__version__ = "0.1.0"
