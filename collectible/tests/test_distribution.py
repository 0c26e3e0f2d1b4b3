"""
Unit Tests for the Distribution Engine

Tests cover:
1. Primary sale split
2. Resale split with remainder to brand
3. Fallback when no holders are tracked
4. Conservation across many payments
"""

import pytest

from collectible.distribution import DistributionEngine
from collectible.errors import InvalidAmountError


class TestPrimarySale:
    """Tests for the primary sale split."""

    def test_all_to_brand(self):
        """Test that a primary sale pays the brand everything."""
        split = DistributionEngine().split_primary_sale(500)

        assert split.brand_total == 500
        assert split.distributed == 0


class TestResaleSplit:
    """Tests for the resale split."""

    def test_three_holders(self):
        """Test the 1000 / 3 holders example."""
        split = DistributionEngine().split_resale(1000, 3)

        assert split.brand_share == 200
        assert split.holders_share == 800
        assert split.per_holder == 266
        assert split.distributed == 798
        assert split.remainder == 2
        assert split.brand_total == 202

    def test_even_split_has_no_remainder(self):
        """Test that an evenly divisible share leaves nothing over."""
        split = DistributionEngine().split_resale(1000, 4)

        assert split.per_holder == 200
        assert split.remainder == 0
        assert split.brand_total == 200

    def test_brand_share_rounds_down(self):
        """Test integer flooring of the brand percentage."""
        split = DistributionEngine().split_resale(7, 1)

        assert split.brand_share == 1
        assert split.per_holder == 6

    def test_fewer_units_than_holders(self):
        """Test that tiny payments produce zero per-holder amounts without error."""
        split = DistributionEngine().split_resale(3, 5)

        assert split.per_holder == 0
        assert split.remainder == split.holders_share
        assert split.brand_total == 3

    def test_no_holders_routes_to_brand(self):
        """Test the fallback when no holders are tracked."""
        split = DistributionEngine().split_resale(1000, 0)

        assert split.brand_total == 1000
        assert split.holder_count == 0
        assert split.distributed == 0
        assert DistributionEngine().assignments(split, []) == []

    @pytest.mark.parametrize("payment", [0, 1, 99, 100, 1001, 123457, 10**18 + 7])
    @pytest.mark.parametrize("holders", [1, 2, 3, 7, 64, 999])
    def test_conservation(self, payment, holders):
        """Test that no value is created or lost by the split."""
        split = DistributionEngine().split_resale(payment, holders)

        assert split.brand_share + holders * split.per_holder + split.remainder == payment
        assert split.remainder < holders

    def test_negative_payment_rejected(self):
        """Test that negative payments are refused."""
        with pytest.raises(InvalidAmountError):
            DistributionEngine().split_resale(-1, 2)


class TestAssignments:
    """Tests for per-holder assignment."""

    def test_one_assignment_per_holder(self):
        """Test that each snapshot member gets the per-holder amount."""
        engine = DistributionEngine()
        split = engine.split_resale(1000, 3)

        assignments = engine.assignments(split, ["alice", "bob", "carol"])

        assert assignments == [("alice", 266), ("bob", 266), ("carol", 266)]

    def test_snapshot_size_must_match(self):
        """Test that a mismatched snapshot is refused."""
        engine = DistributionEngine()
        split = engine.split_resale(1000, 3)

        with pytest.raises(ValueError):
            engine.assignments(split, ["alice"])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
