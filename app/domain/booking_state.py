"""Booking request status machine.

States: received → contactingHospital → proposedOptions → confirmed, with
needsMoreInfo / noAvailability / cancelled as side exits.

The adjacency below is the expected product flow only. Ops may set any status
from any status; nothing here rejects a transition. Moves outside the expected
flow are reported so they can be reviewed, see ``is_suggested_transition``.
"""

RECEIVED = "received"
CONTACTING_HOSPITAL = "contactingHospital"
PROPOSED_OPTIONS = "proposedOptions"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"
NEEDS_MORE_INFO = "needsMoreInfo"
NO_AVAILABILITY = "noAvailability"

BOOKING_STATUSES: tuple[str, ...] = (
    RECEIVED,
    CONTACTING_HOSPITAL,
    PROPOSED_OPTIONS,
    CONFIRMED,
    CANCELLED,
    NEEDS_MORE_INFO,
    NO_AVAILABILITY,
)

INITIAL_STATUS = RECEIVED

_FROM_RECEIVED = {CONTACTING_HOSPITAL, NEEDS_MORE_INFO, NO_AVAILABILITY, CANCELLED}

SUGGESTED_TRANSITIONS: dict[str, set[str]] = {
    RECEIVED: _FROM_RECEIVED,
    CONTACTING_HOSPITAL: {PROPOSED_OPTIONS, NEEDS_MORE_INFO, NO_AVAILABILITY, CANCELLED},
    PROPOSED_OPTIONS: {CONFIRMED, CONTACTING_HOSPITAL, NEEDS_MORE_INFO, CANCELLED},
    CONFIRMED: {CANCELLED},
    CANCELLED: set(),
    NEEDS_MORE_INFO: _FROM_RECEIVED | {CONTACTING_HOSPITAL},
    NO_AVAILABILITY: _FROM_RECEIVED | {CONTACTING_HOSPITAL},
}

# Statuses that notify the guest by email
NOTIFY_STATUSES = frozenset({CONFIRMED, CANCELLED})

# Statuses counted by the ops dashboard
STATS_TOTAL_STATUSES = (CONFIRMED, CANCELLED, RECEIVED, CONTACTING_HOSPITAL, PROPOSED_OPTIONS)
STATS_PENDING_STATUSES = (RECEIVED, CONTACTING_HOSPITAL)


def is_suggested_transition(current: str, target: str) -> bool:
    """Whether ``current → target`` follows the expected flow."""
    return target in SUGGESTED_TRANSITIONS.get(current, set())
