"""
Signals — Payload-free change notification channels

A Signal carries no data. Subscribers are told "something changed" and
re-read whatever state they care about. Delivery is synchronous and in
connection order.

Usage:
    changed = Signal("changed")
    changed.connect(on_change)
    changed.emit()
    changed.disconnect(on_change)
"""

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

Slot = Callable[[], None]


class Signal:
    """Synchronous observer channel without payload."""

    def __init__(self, name: str = ""):
        self.name = name
        self._slots: List[Slot] = []

    def connect(self, slot: Slot) -> None:
        """Subscribe a slot. Connecting the same slot twice is a no-op."""
        if slot not in self._slots:
            self._slots.append(slot)

    def disconnect(self, slot: Slot) -> bool:
        """
        Unsubscribe a slot.

        Returns:
            True if the slot was connected, False otherwise
        """
        try:
            self._slots.remove(slot)
        except ValueError:
            return False
        return True

    def is_connected(self, slot: Slot) -> bool:
        return slot in self._slots

    def emit(self) -> None:
        """Call every connected slot. A failing slot does not stop the others."""
        for slot in list(self._slots):
            try:
                slot()
            except Exception:
                logger.exception("Slot %r failed on signal '%s'", slot, self.name)

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, slots={len(self._slots)})"
