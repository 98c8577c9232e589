"""Side panels: attributes, monitored items, info log, and the menu bar."""

from __future__ import annotations

from .attributes import AttributeReadResult, AttributeReadScheduler, attribute_rows, format_attribute_value
from .log_pane import LogPane, LogPaneHandler, configure_logging, remove_logging
from .menu import MENU_ITEMS, MenuItem, menu_action_for_key, menu_bar_line
from .monitored import DEFAULT_SAMPLING_INTERVAL, MonitoredItem, MonitoredItems

__all__ = [
    "AttributeReadResult",
    "AttributeReadScheduler",
    "attribute_rows",
    "format_attribute_value",
    "LogPane",
    "LogPaneHandler",
    "configure_logging",
    "remove_logging",
    "MENU_ITEMS",
    "MenuItem",
    "menu_action_for_key",
    "menu_bar_line",
    "DEFAULT_SAMPLING_INTERVAL",
    "MonitoredItem",
    "MonitoredItems",
]
