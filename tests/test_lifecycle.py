"""Unit tests for the raffle and ticket state machines.

Run with: pytest tests/test_lifecycle.py -v
"""

import pytest

from raffles.domain import Money, OrganizerId, Raffle, RaffleId, RaffleStatus
from raffles.domain.errors import (
    AlreadyCompleteError,
    BelowMinimumError,
    InvalidStateError,
    SoldOutError,
)
from raffles.domain.lifecycle import (
    RAFFLE_TRANSITIONS,
    can_transition,
    check_can_confirm,
    check_can_draw,
    check_can_sell,
    transition,
)


def make_raffle(**overrides) -> Raffle:
    fields = dict(
        id=RaffleId.new(),
        organizer_id=OrganizerId.new(),
        name="Spring Fundraiser",
        beneficiary_name="Little League",
        ticket_prefix="SPR",
        organizer_venmo="treasurer-venmo",
        ticket_price=Money.of("10"),
        max_tickets=20,
    )
    fields.update(overrides)
    return Raffle(**fields)


class TestRaffleTransitions:
    """Tests for the raffle transition table."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (RaffleStatus.DRAFT, RaffleStatus.ACTIVE),
            (RaffleStatus.ACTIVE, RaffleStatus.DRAWING),
            (RaffleStatus.DRAWING, RaffleStatus.DRAWING),
            (RaffleStatus.DRAWING, RaffleStatus.COMPLETE),
            (RaffleStatus.ACTIVE, RaffleStatus.CANCELLED),
        ],
    )
    def test_allowed_edges(self, current, target):
        """Listed edges are allowed."""
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (RaffleStatus.DRAFT, RaffleStatus.DRAWING),
            (RaffleStatus.ACTIVE, RaffleStatus.COMPLETE),
            (RaffleStatus.DRAWING, RaffleStatus.ACTIVE),
            (RaffleStatus.DRAWING, RaffleStatus.CANCELLED),
        ],
    )
    def test_forbidden_edges(self, current, target):
        """Anything not listed is refused."""
        assert not can_transition(current, target)

    def test_terminal_states_have_no_exits(self):
        """Complete and Cancelled are terminal."""
        assert not RAFFLE_TRANSITIONS[RaffleStatus.COMPLETE]
        assert not RAFFLE_TRANSITIONS[RaffleStatus.CANCELLED]

    def test_transition_raises_with_current_status(self):
        """A refused transition reports where the raffle is."""
        with pytest.raises(InvalidStateError) as exc:
            transition(make_raffle(status=RaffleStatus.COMPLETE), RaffleStatus.DRAWING)
        assert exc.value.details() == {"current_status": "Complete"}


class TestGuards:
    """Tests for the lifecycle guards."""

    def test_draft_cannot_draw(self):
        """Drawing a Draft raffle is an invalid state."""
        with pytest.raises(InvalidStateError):
            check_can_draw(make_raffle())

    def test_minimum_gate_blocks_draw(self):
        """Below the minimum the draw is blocked with the shortfall."""
        raffle = make_raffle(
            status=RaffleStatus.ACTIVE, tickets_sold=5, min_tickets_enabled=True, min_tickets=11
        )
        with pytest.raises(BelowMinimumError) as exc:
            check_can_draw(raffle)
        assert exc.value.shortfall == 6

    def test_minimum_gate_ignored_when_disabled(self):
        """With the gate off a single ticket is enough."""
        check_can_draw(make_raffle(status=RaffleStatus.ACTIVE, tickets_sold=1, min_tickets=11))

    def test_confirm_on_complete_is_already_complete(self):
        """A second confirm reports AlreadyComplete rather than InvalidState."""
        with pytest.raises(AlreadyCompleteError):
            check_can_confirm(make_raffle(status=RaffleStatus.COMPLETE))

    def test_confirm_requires_drawing(self):
        """Confirm on an Active raffle is an invalid state."""
        with pytest.raises(InvalidStateError):
            check_can_confirm(make_raffle(status=RaffleStatus.ACTIVE))

    def test_sell_requires_active(self):
        """Draft raffles do not sell tickets."""
        with pytest.raises(InvalidStateError):
            check_can_sell(make_raffle())

    def test_sell_refuses_when_sold_out(self):
        """A full raffle raises SoldOut."""
        with pytest.raises(SoldOutError):
            check_can_sell(make_raffle(status=RaffleStatus.ACTIVE, tickets_sold=20))
