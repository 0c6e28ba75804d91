"""Position calculator: events + current valuation -> position snapshot.

Pure functions, no I/O. Totals are simple sums and do not depend on event
order; the returned event list is sorted most recent first for display.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from lendwatch.core.exceptions import ComputeError
from lendwatch.domain.models import EventKind, LedgerEvent, PositionSnapshot

ZERO = Decimal("0")


def sort_events(events: Iterable[LedgerEvent]) -> tuple[LedgerEvent, ...]:
    """Return events ordered by ordinal, most recent first."""
    return tuple(sorted(events, key=lambda e: e.ordinal, reverse=True))


def merge_events(
    prior_events: Sequence[LedgerEvent],
    new_events: Sequence[LedgerEvent],
) -> list[LedgerEvent]:
    """
    Append newly observed events to a previously reconciled history.

    New events already present in the history (same transaction, kind, block
    and amount) are dropped, so an overlapping rescan of the watermark block
    is not counted twice. Duplicates inside `new_events` are kept.
    """
    seen = {_identity(e) for e in prior_events}
    merged = list(prior_events)
    merged.extend(e for e in new_events if _identity(e) not in seen)
    return merged


def totals(events: Iterable[LedgerEvent]) -> tuple[Decimal, Decimal]:
    """Return (sum of deposits, sum of withdrawals)."""
    deposits = ZERO
    withdrawals = ZERO
    for event in events:
        if event.amount < 0:
            raise ComputeError(f"Negative amount {event.amount} in event {event.transaction_hash}")
        if event.kind == EventKind.DEPOSIT:
            deposits += event.amount
        elif event.kind == EventKind.WITHDRAW:
            withdrawals += event.amount
        else:
            raise ComputeError(f"Unhandled event kind: {event.kind}")
    return deposits, withdrawals


def zero_snapshot(vault: str) -> PositionSnapshot:
    """Snapshot of a vault the user never interacted with."""
    return PositionSnapshot(vault=vault)


def compute(
    vault: str,
    events: Sequence[LedgerEvent],
    redeem_value: Decimal,
    prior_events: Sequence[LedgerEvent] = (),
) -> PositionSnapshot:
    """
    Compute a position snapshot.

    Args:
        vault: Vault address the events belong to
        events: Events observed in this cycle
        redeem_value: Current redeemable value of the user's shares
        prior_events: History reconciled in earlier cycles, merged with `events`

    Returns:
        PositionSnapshot with:
        - redeem_value > 0: deposited = deposits - withdrawals,
          earnings = redeem_value - deposited. Deposited is not floored;
          a negative value is left for the caller to report.
        - redeem_value == 0: the position is closed (or was never funded),
          deposited = 0 and earnings = withdrawals - deposits.
        - no events at all: the zero snapshot, whatever redeem_value is.
    """
    history = merge_events(prior_events, events) if prior_events else list(events)
    if not history:
        return zero_snapshot(vault)

    if redeem_value < 0:
        raise ComputeError(f"Negative redeemable value {redeem_value} for vault {vault}")

    deposits, withdrawals = totals(history)

    if redeem_value > 0:
        deposited = deposits - withdrawals
        earnings = redeem_value - deposited
    else:
        deposited = ZERO
        earnings = withdrawals - deposits

    return PositionSnapshot(
        vault=vault,
        redeem_value=redeem_value,
        deposited=deposited,
        earnings=earnings,
        events=sort_events(history),
    )


def _identity(event: LedgerEvent) -> tuple:
    return (event.transaction_hash.lower(), event.kind, event.ordinal, event.amount)
