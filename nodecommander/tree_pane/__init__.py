"""Tree pane: lazy tree widget, selection tracking, fetch scheduling, input."""

from __future__ import annotations

from .dispatch import TreeInputDispatcher, TreePaneGeometry
from .fetch import ChildFetchResult, ChildFetchScheduler
from .selection import SelectionTracker
from .widget import TreeWidget

__all__ = [
    "ChildFetchResult",
    "ChildFetchScheduler",
    "SelectionTracker",
    "TreeInputDispatcher",
    "TreePaneGeometry",
    "TreeWidget",
]
