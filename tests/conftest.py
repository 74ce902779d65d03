import logging
from types import SimpleNamespace

import pytest

from bundle_discount.models import BundleRole, LineItem


# This hook is a pluggy hook specification from pytest
# hookwrapper=True allows us to wrap the execution and access the result
@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Extends the test report to surface better info on failure.
    """
    outcome = yield
    rep = outcome.get_result()

    # Only the test call itself, not setup or teardown
    if rep.when == "call" and rep.failed:
        doc = item.obj.__doc__
        if doc:
            from inspect import cleandoc
            rep.sections.append(("Test Description", cleandoc(doc)))


@pytest.fixture(autouse=True)
def package_logger():
    """Undo configure_logging after each test so caplog sees package records."""
    logger = logging.getLogger("bundle_discount")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def cart_line():
    """Build one run-input cart line; role=None leaves the metafield unset."""

    def _build(line_id, quantity, role=None, typename="ProductVariant"):
        merchandise = {"__typename": typename}
        if typename == "ProductVariant":
            merchandise["product"] = {"bundleRole": {"value": role} if role is not None else None}
        return {"id": line_id, "quantity": quantity, "merchandise": merchandise}

    return _build


@pytest.fixture
def cart_payload(cart_line):
    """Build a run-input payload from (id, quantity, role) tuples."""

    def _build(*lines):
        return {"cart": {"lines": [cart_line(*line) for line in lines]}}

    return _build


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with no config file or BUNDLE_* variables in reach."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("BUNDLE_DISCOUNT_PERCENTAGE", "BUNDLE_PATCHES_PER_BUNDLE", "BUNDLE_DISCOUNT_VERBOSE"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def core(line_id, quantity):
    return LineItem(id=line_id, quantity=quantity, role=BundleRole.CORE)


def patch(line_id, quantity):
    return LineItem(id=line_id, quantity=quantity, role=BundleRole.PATCH)


def untagged(line_id, quantity):
    return LineItem(id=line_id, quantity=quantity, role=BundleRole.NONE)


@pytest.fixture
def lines():
    """Shorthand LineItem builders: lines.core / lines.patch / lines.untagged."""

    return SimpleNamespace(core=core, patch=patch, untagged=untagged)
