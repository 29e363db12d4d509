"""BDD tests for colour stock adjustment on receipt verification."""

from pytest_bdd import scenarios

scenarios("features/stock_adjustment.feature")
