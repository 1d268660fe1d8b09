"""BDD tests for bulk pricing tiers."""

from pytest_bdd import scenarios

scenarios("features/bulk_pricing.feature")
