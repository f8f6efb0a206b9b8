"""
conftest.py - Shared pytest fixtures for asset ledger tests

Provides common fixtures used across unit, conformance and functional tests:
- Basic assets (freezable, non-freezable, strict policy)
- Funded assets (alice, bob and carol opted in, balances seeded)

Accounts and builders live in tests/helpers.py.
"""

import pytest

from asset_ledger import STRICT_POLICY

from tests.helpers import ALICE, BOB, CAROL, create_asset, ctx


@pytest.fixture
def asset():
    """Freezable asset, all roles assigned, no accounts touched."""
    return create_asset()


@pytest.fixture
def unfreezable_asset():
    """Asset created with default_frozen=False."""
    return create_asset(default_frozen=False)


@pytest.fixture
def strict_asset():
    """Freezable asset with every AssetPolicy fix switched on."""
    return create_asset(policy=STRICT_POLICY)


@pytest.fixture
def funded_asset(asset):
    """Asset with alice, bob and carol opted in; alice holds 1000, bob 250."""
    for account in (ALICE, BOB, CAROL):
        asset.opt_in(ctx(account))
    asset.set_balance(ALICE, 1000)
    asset.set_balance(BOB, 250)
    asset.sink.clear()
    return asset


@pytest.fixture
def funded_strict_asset(strict_asset):
    """Strict-policy asset with alice, bob and carol opted in; alice holds 1000."""
    for account in (ALICE, BOB, CAROL):
        strict_asset.opt_in(ctx(account))
    strict_asset.set_balance(ALICE, 1000)
    strict_asset.sink.clear()
    return strict_asset
