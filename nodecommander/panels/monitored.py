"""Monitored-items table: polled live values for selected variables."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..address_space import AddressSpace, format_live_value

logger = logging.getLogger(__name__)

DEFAULT_SAMPLING_INTERVAL = 1.0
NAME_COLUMNS = 20
NODE_ID_COLUMNS = 22
UNSAMPLED_VALUE = "Q"


@dataclass
class MonitoredItem:
    node_id: str
    browse_name: str
    value: str = UNSAMPLED_VALUE
    next_sample_at: float = 0.0


class MonitoredItems:
    """Ordered set of monitored nodes, sampled on the control thread.

    ``sample`` re-reads every item whose sampling interval has elapsed. A
    failed read is logged and shown in place of the value; it never removes
    the item.
    """

    def __init__(
        self,
        read_value: Callable[[str], object],
        sampling_interval: float = DEFAULT_SAMPLING_INTERVAL,
    ) -> None:
        self._read_value = read_value
        self.sampling_interval = max(0.0, float(sampling_interval))
        self._items: dict[str, MonitoredItem] = {}

    @classmethod
    def for_space(cls, space: AddressSpace, sampling_interval: float = DEFAULT_SAMPLING_INTERVAL) -> MonitoredItems:
        return cls(space.read_value, sampling_interval)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._items

    @property
    def items(self) -> list[MonitoredItem]:
        return list(self._items.values())

    def monitor(self, node_id: str, browse_name: str) -> bool:
        """Start monitoring ``node_id``; returns ``False`` when already monitored."""
        if node_id in self._items:
            logger.info("Already monitoring %s", node_id)
            return False
        self._items[node_id] = MonitoredItem(node_id=node_id, browse_name=browse_name)
        logger.info("monitoring %s (%s)", browse_name, node_id)
        return True

    def unmonitor(self, node_id: str) -> bool:
        """Stop monitoring ``node_id``; returns ``False`` when it was not monitored."""
        if self._items.pop(node_id, None) is None:
            logger.info("%s was not being monitored", node_id)
            return False
        logger.info("stopped monitoring %s", node_id)
        return True

    def sample(self, now: float) -> list[str]:
        """Read values that are due and return the ids whose text changed."""
        changed: list[str] = []
        for item in self._items.values():
            if now < item.next_sample_at:
                continue
            item.next_sample_at = now + self.sampling_interval
            try:
                text = format_live_value(self._read_value(item.node_id))
            except Exception as exc:
                logger.warning("cannot read %s: %s", item.node_id, exc)
                text = format_live_value(f"<{exc}>")
            if text != item.value:
                item.value = text
                changed.append(item.node_id)
        return changed

    def value_for(self, node_id: str) -> str | None:
        item = self._items.get(node_id)
        if item is None or item.value == UNSAMPLED_VALUE:
            return None
        return item.value

    def values(self) -> dict[str, str]:
        """Sampled values keyed by node id, for tree label decoration."""
        return {
            node_id: item.value
            for node_id, item in self._items.items()
            if item.value != UNSAMPLED_VALUE
        }

    def rows(self, width: int) -> list[str]:
        """Table rows (name, node id, value) fitted to ``width`` columns."""
        out: list[str] = []
        for item in self._items.values():
            line = (
                f"{item.browse_name[:NAME_COLUMNS]:<{NAME_COLUMNS}} "
                f"{item.node_id[:NODE_ID_COLUMNS]:<{NODE_ID_COLUMNS}} "
                f"{item.value}"
            )
            out.append(line[: max(0, width)])
        return out


__all__ = [
    "DEFAULT_SAMPLING_INTERVAL",
    "MonitoredItem",
    "MonitoredItems",
]
