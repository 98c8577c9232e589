"""Key-token to action tables used by the pane dispatchers."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

KeyAction = Callable[[], "bool | None"]


@dataclass(frozen=True)
class KeyComboBinding:
    """Every token in ``combos`` triggers ``handler``."""

    combos: tuple[str, ...]
    handler: KeyAction


class KeyComboRegistry:
    """Dispatch table keyed by exact key token; later bindings win."""

    def __init__(self, bindings: Iterable[KeyComboBinding] = ()) -> None:
        self._actions: dict[str, KeyAction] = {}
        self.register_bindings(*bindings)

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            if not binding.combos:
                raise ValueError("key binding needs at least one key token")
            for token in binding.combos:
                self._actions[token] = binding.handler
        return self

    def handles(self, key: str) -> bool:
        return key in self._actions

    @property
    def tokens(self) -> frozenset[str]:
        return frozenset(self._actions)

    def dispatch(self, key: str) -> bool | None:
        """Run the action bound to ``key``; ``None`` when nothing is bound."""
        action = self._actions.get(key)
        if action is None:
            return None
        return action()
