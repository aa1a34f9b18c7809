"""
orders.py

Per-side order lifecycle for our market maker.

Each side (bid / ask) holds at most ONE logical order. Its state moves
through a small closed state machine:

    IDLE | CANCELED | FILLED --arm-------------> WORKING
    WORKING ------------------request_cancel---> CANCEL_PENDING
    WORKING ------------------fill-------------> FILLED
    CANCEL_PENDING -----------fill-------------> FILLED
    CANCEL_PENDING -----------confirm_cancel---> CANCELED
    FILLED | CANCELED --------recycle----------> IDLE

CANCEL_PENDING must never survive the step that created it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, assert_never

from .errors import LostCancelError, OrderStateError

logger = logging.getLogger(__name__)


class Side(Enum):
    BID = "bid"
    ASK = "ask"

    @property
    def sign(self) -> int:
        """
        Inventory sign of a fill on this side:
        +1 for a bid (we buy), -1 for an ask (we sell).
        """
        return 1 if self is Side.BID else -1


class OrderState(Enum):
    IDLE = "idle"
    WORKING = "working"
    CANCEL_PENDING = "cancel_pending"
    CANCELED = "canceled"
    FILLED = "filled"


# states from which the quoting policy may (re-)arm a side
ARMABLE: FrozenSet[OrderState] = frozenset(
    {OrderState.IDLE, OrderState.CANCELED, OrderState.FILLED}
)

# terminal for the current order instance, recycled to IDLE after reporting
TERMINAL: FrozenSet[OrderState] = frozenset({OrderState.CANCELED, OrderState.FILLED})

_TRANSITIONS: Dict[OrderState, FrozenSet[OrderState]] = {
    OrderState.IDLE: frozenset({OrderState.WORKING}),
    OrderState.WORKING: frozenset({OrderState.CANCEL_PENDING, OrderState.FILLED}),
    OrderState.CANCEL_PENDING: frozenset({OrderState.FILLED, OrderState.CANCELED}),
    OrderState.CANCELED: frozenset({OrderState.WORKING, OrderState.IDLE}),
    OrderState.FILLED: frozenset({OrderState.WORKING, OrderState.IDLE}),
}


def state_code(state: OrderState) -> str:
    """
    One-letter report code for a state.

    Written as an exhaustive branch so a new OrderState member
    fails type checking here until it gets a code.
    """
    if state is OrderState.IDLE:
        return "N"
    elif state is OrderState.WORKING:
        return "A"
    elif state is OrderState.CANCEL_PENDING:
        return "P"  # never expected in a report
    elif state is OrderState.CANCELED:
        return "C"
    elif state is OrderState.FILLED:
        return "F"
    else:
        assert_never(state)


@dataclass
class Order:
    """
    The single resting order on one side.

    - side:  BID or ASK
    - state: lifecycle state
    - price: limit price; only meaningful while WORKING or CANCEL_PENDING
    """
    side: Side
    state: OrderState = OrderState.IDLE
    price: float = 0.0

    # ---------- internal helpers ----------

    def _transition(self, new_state: OrderState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise OrderStateError(
                f"{self.side.value} order cannot go {self.state.value} -> {new_state.value}"
            )
        logger.debug(
            "%s order %s -> %s @ %.4f",
            self.side.value, self.state.value, new_state.value, self.price,
        )
        self.state = new_state

    # ---------- public API ----------

    @property
    def is_working(self) -> bool:
        return self.state is OrderState.WORKING

    @property
    def is_armable(self) -> bool:
        return self.state in ARMABLE

    def arm(self, price: float) -> None:
        """
        Place a fresh working order at `price`.
        Only legal from IDLE, CANCELED or FILLED.
        """
        if not self.is_armable:
            raise OrderStateError(
                f"cannot arm {self.side.value} order in state {self.state.value}"
            )
        self.price = price
        self._transition(OrderState.WORKING)

    def request_cancel(self) -> bool:
        """
        Send a cancel for a WORKING order.
        Returns True if a cancel is now in flight, False (no-op) otherwise.
        """
        if self.state is not OrderState.WORKING:
            return False
        self._transition(OrderState.CANCEL_PENDING)
        return True

    def mark_filled(self) -> None:
        self._transition(OrderState.FILLED)

    def confirm_cancel(self) -> None:
        self._transition(OrderState.CANCELED)

    def recycle(self) -> bool:
        """
        End-of-step reset: FILLED / CANCELED -> IDLE.
        IDLE and WORKING orders are left alone. Returns True if reset.
        """
        if self.state not in TERMINAL:
            return False
        self._transition(OrderState.IDLE)
        return True

    @property
    def code(self) -> str:
        return state_code(self.state)


def check_invariant(order: Order, step: Optional[int] = None) -> None:
    """
    No lost cancels: after cancel resolution an order is never CANCEL_PENDING.
    """
    if order.state is OrderState.CANCEL_PENDING:
        raise LostCancelError(order.side.value, step=step, price=order.price)
