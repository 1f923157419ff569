"""
Status ladders for orders, custom-order requests and bookings.

Statuses progress forward along an ordered ladder; a rejecting status is
reachable from any non-terminal step. The last step and every rejecting
status are terminal. Nothing here touches the database.
"""
from dataclasses import dataclass, field

from shared.errors import InvalidTransition


@dataclass(frozen=True)
class StatusLadder:
    name: str
    steps: tuple
    rejecting: frozenset = field(default_factory=frozenset)

    @property
    def initial(self) -> str:
        return self.steps[0]

    @property
    def terminal(self) -> frozenset:
        return frozenset({self.steps[-1]}) | self.rejecting

    def knows(self, status: str) -> bool:
        return status in self.steps or status in self.rejecting

    def position(self, status: str) -> int:
        # Unknown statuses rank as the initial step
        try:
            return self.steps.index(status)
        except ValueError:
            return 0

    def can_transition(self, current: str, target: str) -> bool:
        if current in self.terminal:
            return False
        if target in self.rejecting:
            return True
        if target not in self.steps:
            return False
        return self.position(target) > self.position(current)

    def validate(self, current: str, target: str) -> None:
        if not self.knows(target):
            raise InvalidTransition(f"Unknown {self.name} status '{target}'")
        if not self.can_transition(current, target):
            raise InvalidTransition(
                f"{self.name} cannot transition from '{current}' to '{target}'"
            )


ORDER_STATUS = StatusLadder(
    name="Order",
    steps=("pending", "confirmed", "processing", "shipped", "in_delivery", "delivered"),
    rejecting=frozenset({"cancelled"}),
)

CUSTOM_ORDER_STATUS = StatusLadder(
    name="Custom order",
    steps=(
        "pending",
        "under_review",
        "payment_pending",
        "payment_done",
        "in_progress",
        "in_delivery",
        "delivered",
    ),
    rejecting=frozenset({"rejected"}),
)

BOOKING_STATUS = StatusLadder(
    name="Booking",
    steps=("pending", "confirmed", "completed"),
    rejecting=frozenset({"cancelled"}),
)
