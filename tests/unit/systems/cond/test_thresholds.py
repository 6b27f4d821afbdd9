"""
Unit tests for the leaf threshold conditions.

Tests MembersThreshold, RoleThreshold and RoleCount: boundaries, zero
populations, signal range, monotonicity, and statelessness.
"""

from __future__ import annotations

import pytest

from govkit.primitives.common import VoteChoice
from govkit.systems.cond import (
    Ballot,
    ConditionConfigError,
    MembersThreshold,
    RoleCount,
    RoleThreshold,
)
from govkit.systems.cond.thresholds import _FractionThreshold
from govkit.systems.dao.members import MemoryMemberDirectory


# ─── Fixtures ─────────────────────────────────────────────────────


def make_directory() -> MemoryMemberDirectory:
    return MemoryMemberDirectory(
        members=["m1", "m2", "m3", "m4"],
        roles={"m1": ["admin"], "m2": ["admin", "CFO"], "m4": ["CFO"]},
    )


def make_ballot(**votes: str) -> Ballot:
    ballot = Ballot()
    for voter, choice in votes.items():
        ballot.vote(voter, VoteChoice(choice))
    return ballot


def members_threshold(threshold: float, directory: MemoryMemberDirectory) -> MembersThreshold:
    return MembersThreshold(threshold, directory.is_member, directory.members_count)


# ─── Tests: MembersThreshold ──────────────────────────────────────


class TestMembersThreshold:
    def test_scenario_three_members_sixty_percent(self):
        directory = MemoryMemberDirectory(members=["member1", "member2", "member3"])
        cond = members_threshold(0.6, directory)
        ballot = Ballot()

        ballot.vote("member1", VoteChoice.YES)
        assert cond.eval(ballot) is False
        assert cond.signal(ballot) == pytest.approx(1 / 3)

        ballot.vote("member2", VoteChoice.YES)
        assert cond.eval(ballot) is True
        assert cond.signal(ballot) == pytest.approx(2 / 3)

    def test_exact_boundary_is_satisfied(self):
        directory = MemoryMemberDirectory(members=[f"m{i}" for i in range(5)])
        cond = members_threshold(0.6, directory)
        ballot = make_ballot(m0="yes", m1="yes", m2="yes")
        assert cond.eval(ballot) is True

    def test_decimal_threshold_boundary_not_lost_to_rounding(self):
        directory = MemoryMemberDirectory(members=[f"m{i}" for i in range(10)])
        cond = members_threshold(0.1, directory)
        assert cond.eval(make_ballot(m0="yes")) is True

    def test_half_threshold_boundary(self):
        directory = MemoryMemberDirectory(members=["a", "b"])
        cond = members_threshold(0.5, directory)
        assert cond.eval(make_ballot(a="yes")) is True
        assert cond.eval(make_ballot(a="no", b="abstain")) is False

    def test_only_yes_from_members_counts(self):
        directory = make_directory()
        cond = members_threshold(1.0, directory)
        ballot = make_ballot(m1="yes", m2="no", m3="abstain", outsider="yes")
        assert cond.signal(ballot) == pytest.approx(1 / 4)
        assert cond.eval(ballot) is False

    def test_zero_members_never_passes(self):
        directory = MemoryMemberDirectory()
        cond = members_threshold(0.5, directory)
        ballot = make_ballot(anyone="yes")
        assert cond.eval(ballot) is False
        assert cond.signal(ballot) == 0.0

    def test_reads_membership_at_query_time(self):
        directory = MemoryMemberDirectory(members=["a", "b", "c", "d"])
        cond = members_threshold(0.5, directory)
        ballot = make_ballot(a="yes")
        assert cond.eval(ballot) is False
        directory.remove_member("c")
        directory.remove_member("d")
        assert cond.eval(ballot) is True

    def test_full_threshold_signal_is_one(self):
        directory = MemoryMemberDirectory(members=["a"])
        cond = members_threshold(1.0, directory)
        assert cond.signal(make_ballot(a="yes")) == 1.0

    @pytest.mark.parametrize("threshold", [0.0, -0.1, 1.01, 2])
    def test_invalid_threshold_raises(self, threshold):
        directory = make_directory()
        with pytest.raises(ConditionConfigError, match="Threshold"):
            members_threshold(threshold, directory)

    def test_render(self):
        cond = members_threshold(0.6, make_directory())
        assert cond.render() == "60% of members"

    def test_render_with_votes_includes_tally(self):
        cond = members_threshold(0.6, make_directory())
        text = cond.render_with_votes(make_ballot(m1="yes"))
        assert text.startswith("60% of members")
        assert "1/4 yes" in text
        assert "0.25" in text

    def test_same_condition_many_ballots(self):
        cond = members_threshold(0.6, make_directory())
        passing = make_ballot(m1="yes", m2="yes", m3="yes")
        failing = make_ballot(m1="yes", m2="yes")
        for _ in range(3):
            assert cond.eval(passing) is True
            assert cond.eval(failing) is False


# ─── Tests: RoleThreshold ─────────────────────────────────────────


class TestRoleThreshold:
    def test_counts_only_role_holders(self):
        directory = make_directory()
        cond = RoleThreshold(0.5, "admin", directory.has_role, directory.role_count)
        ballot = make_ballot(m3="yes", m4="yes")
        assert cond.eval(ballot) is False
        assert cond.signal(ballot) == 0.0

        ballot.vote("m1", VoteChoice.YES)
        assert cond.eval(ballot) is True
        assert cond.signal(ballot) == pytest.approx(0.5)

    def test_role_with_no_holders(self):
        directory = make_directory()
        cond = RoleThreshold(0.5, "auditor", directory.has_role, directory.role_count)
        assert cond.eval(make_ballot(m1="yes")) is False
        assert cond.signal(make_ballot(m1="yes")) == 0.0

    def test_empty_role_raises(self):
        directory = make_directory()
        with pytest.raises(ConditionConfigError, match="Role"):
            RoleThreshold(0.5, "", directory.has_role, directory.role_count)

    def test_render(self):
        directory = make_directory()
        cond = RoleThreshold(0.5, "admin", directory.has_role, directory.role_count)
        assert cond.render() == "50% of admin"


# ─── Tests: RoleCount ─────────────────────────────────────────────


class TestRoleCount:
    def test_two_cfo_yes_votes(self):
        directory = MemoryMemberDirectory(roles={"cfo1": ["CFO"], "cfo2": ["CFO"]})
        directory.add_member("bystander")
        cond = RoleCount(2, "CFO", directory.has_role)
        ballot = Ballot()

        ballot.vote("cfo1", VoteChoice.YES)
        assert cond.eval(ballot) is False
        assert cond.signal(ballot) == pytest.approx(0.5)

        ballot.vote("cfo2", VoteChoice.YES)
        assert cond.eval(ballot) is True

        ballot.vote("bystander", VoteChoice.NO)
        assert cond.eval(ballot) is True
        assert cond.signal(ballot) == 1.0

    def test_zero_count_is_vacuously_satisfied(self):
        directory = make_directory()
        cond = RoleCount(0, "CFO", directory.has_role)
        assert cond.eval(Ballot()) is True
        assert cond.signal(Ballot()) == 1.0

    def test_signal_capped_at_one(self):
        directory = make_directory()
        cond = RoleCount(1, "CFO", directory.has_role)
        ballot = make_ballot(m2="yes", m4="yes")
        assert cond.signal(ballot) == 1.0

    def test_no_vote_from_role_holder_does_not_count(self):
        directory = make_directory()
        cond = RoleCount(1, "CFO", directory.has_role)
        assert cond.eval(make_ballot(m2="no", m4="abstain")) is False

    @pytest.mark.parametrize("count", [-1, 1.5, True])
    def test_invalid_count_raises(self, count):
        directory = make_directory()
        with pytest.raises(ConditionConfigError, match="Count"):
            RoleCount(count, "CFO", directory.has_role)

    def test_render(self):
        directory = make_directory()
        assert RoleCount(2, "CFO", directory.has_role).render() == "2 CFO"


# ─── Tests: Monotonicity ──────────────────────────────────────────


def test_adding_yes_votes_never_decreases_signal():
    directory = MemoryMemberDirectory(
        members=[f"m{i}" for i in range(6)],
        roles={"m0": ["admin"], "m1": ["admin"], "m2": ["admin"], "m3": ["CFO"]},
    )
    conditions = [
        members_threshold(0.6, directory),
        RoleThreshold(0.5, "admin", directory.has_role, directory.role_count),
        RoleCount(2, "admin", directory.has_role),
    ]
    ballot = Ballot()
    previous = [c.signal(ballot) for c in conditions]
    for i in range(6):
        ballot.vote(f"m{i}", VoteChoice.YES)
        current = [c.signal(ballot) for c in conditions]
        for before, after in zip(previous, current):
            assert after >= before
            assert 0.0 <= after <= 1.0
        previous = current


# ─── Tests: Fraction base ─────────────────────────────────────────


def test_fraction_rule_without_counting_hooks_cannot_be_built():
    class _Incomplete(_FractionThreshold):
        def render(self) -> str:
            return "incomplete"

        def render_with_votes(self, ballot: Ballot) -> str:
            return "incomplete"

    with pytest.raises(TypeError, match="abstract"):
        _Incomplete(0.5)


def test_fraction_rule_with_counting_hooks_evaluates():
    class _FixedPopulation(_FractionThreshold):
        def _approvals(self, ballot: Ballot) -> int:
            return ballot.total()

        def _population(self) -> int:
            return 4

        def render(self) -> str:
            return "fixed"

        def render_with_votes(self, ballot: Ballot) -> str:
            return "fixed"

    cond = _FixedPopulation(0.5)
    ballot = Ballot()
    ballot.vote("x", VoteChoice.NO)
    assert cond.eval(ballot) is False
    ballot.vote("y", VoteChoice.NO)
    assert cond.eval(ballot) is True
    assert cond.signal(ballot) == pytest.approx(0.5)
