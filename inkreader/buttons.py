"""Physical buttons: debounced press detection and deep-sleep wake decoding."""

from __future__ import annotations

import abc
import enum
import time
from collections.abc import Callable

from inkreader.actions import ActionCallback, UIAction

__all__ = [
    "BUTTON_DEBOUNCE_US",
    "WakeCause",
    "ButtonControls",
    "GPIOButton",
    "ButtonSet",
]

# A press must last longer than this (in microseconds) to count.
BUTTON_DEBOUNCE_US = 50_000

Clock = Callable[[], int]


def _now_us() -> int:
    return time.monotonic_ns() // 1000


def _check_active_level(active_level: int) -> int:
    if active_level not in (0, 1):
        raise ValueError(f"active level must be 0 or 1, not {active_level!r}")
    return active_level


class WakeCause(enum.Enum):
    """Why the device came out of deep sleep."""

    OTHER = "other"
    ULP = "ulp"  # woken by the low-power coprocessor (active-low buttons)
    EXT1 = "ext1"  # woken by an external pin going high (active-high buttons)


class ButtonControls(abc.ABC):
    """A set of buttons that can also wake the device from deep sleep."""

    @abc.abstractmethod
    def did_wake_from_deep_sleep(self, cause: WakeCause) -> bool:
        """Whether ``cause`` means one of these buttons woke the device."""

    @abc.abstractmethod
    def action_for_wake_mask(self, mask: int) -> UIAction:
        """The action of the button whose bit is set in ``mask``."""


class GPIOButton:
    """A level-triggered button that reports a press on release.

    Each call to ``handle_interrupt`` flips between waiting for the press and
    waiting for the release; ``trigger_level`` is the pin level that the next
    interrupt should fire on.
    """

    def __init__(
        self,
        active_level: int,
        callback: Callable[[], None],
        clock: Clock | None = None,
    ) -> None:
        self.active_level = _check_active_level(active_level)
        self._callback = callback
        self._clock = clock or _now_us
        self.pressed = False
        self._press_start = 0

    @property
    def trigger_level(self) -> int:
        """Pin level the next interrupt is expected at."""
        return 1 - self.active_level if self.pressed else self.active_level

    def handle_interrupt(self) -> bool:
        """Process one level interrupt; returns True when a press was reported."""
        if self.pressed:
            self.pressed = False
            if self._clock() - self._press_start > BUTTON_DEBOUNCE_US:
                self._callback()
                return True
            return False
        self.pressed = True
        self._press_start = self._clock()
        return False


class ButtonSet(ButtonControls):
    """Up, down and select buttons wired to numbered pins."""

    def __init__(
        self,
        up_pin: int,
        down_pin: int,
        select_pin: int,
        active_level: int,
        on_action: ActionCallback,
    ) -> None:
        for name, pin in (("up", up_pin), ("down", down_pin), ("select", select_pin)):
            if not isinstance(pin, int) or pin < 0:
                raise ValueError(f"{name} pin must be a non-negative integer, not {pin!r}")
        self.active_level = _check_active_level(active_level)
        self._pins = (
            (up_pin, UIAction.UP),
            (down_pin, UIAction.DOWN),
            (select_pin, UIAction.SELECT),
        )
        self._on_action = on_action
        self.up = GPIOButton(active_level, lambda: on_action(UIAction.UP))
        self.down = GPIOButton(active_level, lambda: on_action(UIAction.DOWN))
        self.select = GPIOButton(active_level, lambda: on_action(UIAction.SELECT))

    @property
    def wake_mask(self) -> int:
        """Bit mask of all pins that may wake the device."""
        mask = 0
        for pin, _ in self._pins:
            mask |= 1 << pin
        return mask

    def did_wake_from_deep_sleep(self, cause: WakeCause) -> bool:
        if self.active_level == 0:
            return cause is WakeCause.ULP
        return cause is WakeCause.EXT1

    def action_for_wake_mask(self, mask: int) -> UIAction:
        for pin, action in self._pins:
            if mask & (1 << pin):
                return action
        return UIAction.NONE