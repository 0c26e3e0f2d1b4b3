"""
Unit Tests for the Reward Ledger

Tests cover:
1. Assignment
2. Claiming unexpired entries only
3. Sweeping expired entries over a registry range
4. Range validation
"""

import pytest

from collectible.errors import InvalidRangeError
from collectible.registry import HolderRegistry
from collectible.rewards import RewardLedger


NOW = 1_700_000_000


def make_registry(*holders):
    registry = HolderRegistry()
    for holder in holders:
        registry.add(holder)
    return registry


class TestAssign:
    """Tests for reward assignment."""

    def test_assign_appends_entries(self):
        """Test that each assignment adds a pending entry."""
        ledger = RewardLedger()

        ledger.assign("alice", 266, NOW + 10)
        ledger.assign("alice", 100, NOW + 20)

        assert ledger.pending_count("alice") == 2
        assert ledger.pending_count("bob") == 0

    def test_zero_amount_entry_allowed(self):
        """Test that a zero-value reward is stored without error."""
        ledger = RewardLedger()

        entry = ledger.assign("alice", 0, NOW + 10)

        assert entry.amount == 0
        assert ledger.pending_count("alice") == 1


class TestClaimUnexpired:
    """Tests for claiming."""

    def test_claim_takes_only_unexpired(self):
        """Test that an expired entry stays behind for sweeping."""
        ledger = RewardLedger()
        ledger.assign("alice", 50, NOW - 1)
        ledger.assign("alice", 266, NOW + 100)

        total = ledger.claim_unexpired("alice", NOW)

        assert total == 266
        remaining = ledger.entries("alice")
        assert len(remaining) == 1
        assert remaining[0].amount == 50

    def test_claim_at_exact_expiry(self):
        """Test that an entry expiring exactly now is still claimable."""
        ledger = RewardLedger()
        ledger.assign("alice", 70, NOW)

        assert ledger.claim_unexpired("alice", NOW) == 70
        assert ledger.pending_count("alice") == 0

    def test_claim_visits_swapped_entries(self):
        """Test that consecutive matching entries are all taken."""
        ledger = RewardLedger()
        ledger.assign("alice", 1, NOW + 5)
        ledger.assign("alice", 2, NOW - 5)
        ledger.assign("alice", 4, NOW + 5)
        ledger.assign("alice", 8, NOW + 5)

        total = ledger.claim_unexpired("alice", NOW)

        assert total == 13
        assert [e.amount for e in ledger.entries("alice")] == [2]

    def test_claim_twice_returns_zero(self):
        """Test that claimed entries cannot be claimed again."""
        ledger = RewardLedger()
        ledger.assign("alice", 10, NOW + 5)

        assert ledger.claim_unexpired("alice", NOW) == 10
        assert ledger.claim_unexpired("alice", NOW) == 0

    def test_claim_unknown_holder(self):
        """Test that claiming with no entries yields zero."""
        assert RewardLedger().claim_unexpired("nobody", NOW) == 0

    def test_claimable_amount_does_not_mutate(self):
        """Test the claim preview."""
        ledger = RewardLedger()
        ledger.assign("alice", 10, NOW + 5)
        ledger.assign("alice", 20, NOW - 5)

        assert ledger.claimable_amount("alice", NOW) == 10
        assert ledger.pending_count("alice") == 2


class TestSweepExpired:
    """Tests for sweeping."""

    def test_sweep_takes_only_expired(self):
        """Test that unexpired entries survive a sweep."""
        registry = make_registry("alice", "bob")
        ledger = RewardLedger()
        ledger.assign("alice", 50, NOW - 1)
        ledger.assign("alice", 60, NOW + 1)
        ledger.assign("bob", 70, NOW - 100)

        total = ledger.sweep_expired(registry, 0, 1, NOW)

        assert total == 120
        assert [e.amount for e in ledger.entries("alice")] == [60]
        assert ledger.pending_count("bob") == 0

    def test_sweep_respects_range(self):
        """Test that holders outside the range are untouched."""
        registry = make_registry("alice", "bob", "carol")
        ledger = RewardLedger()
        for holder in ("alice", "bob", "carol"):
            ledger.assign(holder, 10, NOW - 1)

        total = ledger.sweep_expired(registry, 1, 1, NOW)

        assert total == 10
        assert ledger.pending_count("alice") == 1
        assert ledger.pending_count("bob") == 0
        assert ledger.pending_count("carol") == 1

    def test_sweep_is_idempotent(self):
        """Test that a second sweep over the same range finds nothing."""
        registry = make_registry("alice")
        ledger = RewardLedger()
        ledger.assign("alice", 10, NOW - 1)

        assert ledger.sweep_expired(registry, 0, 0, NOW) == 10
        assert ledger.sweep_expired(registry, 0, 0, NOW) == 0

    def test_sweep_accounts(self):
        """Test sweeping explicitly named accounts."""
        ledger = RewardLedger()
        ledger.assign("former", 30, NOW - 1)
        ledger.assign("current", 40, NOW - 1)

        assert ledger.sweep_expired_accounts(["former"], NOW) == 30
        assert ledger.accounts() == ["current"]

    @pytest.mark.parametrize("start,end", [(1, 0), (0, 2), (2, 2), (-1, 0)])
    def test_invalid_range(self, start, end):
        """Test that malformed bounds fail and mutate nothing."""
        registry = make_registry("alice", "bob")
        ledger = RewardLedger()
        ledger.assign("alice", 10, NOW - 1)

        with pytest.raises(InvalidRangeError):
            ledger.sweep_expired(registry, start, end, NOW)

        assert ledger.pending_count("alice") == 1

    def test_empty_registry_is_invalid_range(self):
        """Test that no range is valid without holders."""
        with pytest.raises(InvalidRangeError):
            RewardLedger().sweep_expired(HolderRegistry(), 0, 0, NOW)


class TestTerminalUniqueness:
    """Tests that an entry resolves through exactly one path."""

    def test_claim_and_sweep_partition_entries(self):
        """Test that claim and sweep together return every unit exactly once."""
        registry = make_registry("alice")
        ledger = RewardLedger()
        amounts = [(5, NOW - 3), (7, NOW + 3), (11, NOW - 1), (13, NOW), (17, NOW + 9)]
        for amount, expiry in amounts:
            ledger.assign("alice", amount, expiry)

        claimed = ledger.claim_unexpired("alice", NOW)
        swept = ledger.sweep_expired(registry, 0, 0, NOW)

        assert claimed == 7 + 13 + 17
        assert swept == 5 + 11
        assert claimed + swept == sum(a for a, _ in amounts)
        assert ledger.pending_count("alice") == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
