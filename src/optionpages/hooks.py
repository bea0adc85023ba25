"""Action and filter registry for the admin shell.

Callbacks are grouped by hook name and run in ascending priority order; callbacks
sharing a priority run in registration order. Filters thread a value through
each callback, actions discard return values.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

LOGGER = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


@dataclass
class HookCallback:
    """A single registered callback."""

    callback: Callable[..., Any]
    priority: int = DEFAULT_PRIORITY
    accepted_args: int = 1
    sequence: int = 0

    def invoke(self, args: tuple[Any, ...]) -> Any:
        return self.callback(*args[: self.accepted_args])


class HookRegistry:
    """Registry of actions and filters keyed by hook name."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[HookCallback]] = defaultdict(list)
        self._did_action: dict[str, int] = defaultdict(int)
        self._sequence = 0

    def add_filter(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = 1,
    ) -> None:
        self._sequence += 1
        self._hooks[hook_name].append(
            HookCallback(callback=callback, priority=priority, accepted_args=accepted_args, sequence=self._sequence)
        )
        LOGGER.debug("Registered %s on '%s' (priority %d)", _callback_name(callback), hook_name, priority)

    # Actions and filters share storage, only dispatch differs.
    add_action = add_filter

    def remove_filter(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
    ) -> bool:
        """Remove a callback registered with the given priority.

        Returns:
            True if a callback was removed
        """
        callbacks = self._hooks.get(hook_name, [])
        for index, entry in enumerate(callbacks):
            if entry.callback == callback and entry.priority == priority:
                del callbacks[index]
                return True
        return False

    remove_action = remove_filter

    def has_filter(self, hook_name: str, callback: Callable[..., Any] | None = None) -> bool:
        callbacks = self._hooks.get(hook_name, [])
        if callback is None:
            return bool(callbacks)
        return any(entry.callback == callback for entry in callbacks)

    has_action = has_filter

    def apply_filters(self, hook_name: str, value: Any, *args: Any) -> Any:
        """Pass ``value`` through every callback registered on ``hook_name``."""
        for entry in self._ordered(hook_name):
            value = entry.invoke((value, *args))
        return value

    def do_action(self, hook_name: str, *args: Any) -> None:
        """Run every callback registered on ``hook_name``."""
        self._did_action[hook_name] += 1
        for entry in self._ordered(hook_name):
            entry.invoke(args)

    def did_action(self, hook_name: str) -> int:
        """Return how many times an action has fired."""
        return self._did_action.get(hook_name, 0)

    def clear(self) -> None:
        self._hooks.clear()
        self._did_action.clear()

    def _ordered(self, hook_name: str) -> list[HookCallback]:
        # Snapshot so callbacks may register further hooks while running.
        return sorted(self._hooks.get(hook_name, []), key=lambda entry: (entry.priority, entry.sequence))


def _callback_name(callback: Callable[..., Any]) -> str:
    owner = getattr(callback, "__self__", None)
    name = getattr(callback, "__name__", repr(callback))
    if owner is not None:
        return f"{type(owner).__name__}.{name}"
    return name
