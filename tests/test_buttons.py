import time

import pytest

from inkreader.actions import UIAction
from inkreader.buttons import BUTTON_DEBOUNCE_US, ButtonSet, GPIOButton, WakeCause


class FakeClock:
    def __init__(self):
        self.now = 0

    def __call__(self):
        return self.now


def make_button(active_level=0):
    clock = FakeClock()
    presses = []
    button = GPIOButton(active_level, lambda: presses.append(True), clock)
    return button, clock, presses


def test_long_press_reports_on_release():
    button, clock, presses = make_button()
    assert button.handle_interrupt() is False
    clock.now += BUTTON_DEBOUNCE_US + 1
    assert button.handle_interrupt() is True
    assert presses == [True]


def test_short_press_is_ignored():
    button, clock, presses = make_button()
    button.handle_interrupt()
    clock.now += BUTTON_DEBOUNCE_US
    assert button.handle_interrupt() is False
    assert presses == []


@pytest.mark.parametrize("level", [0, 1])
def test_trigger_level_flips_between_press_and_release(level):
    button, clock, _ = make_button(level)
    assert button.trigger_level == level
    button.handle_interrupt()
    assert button.pressed is True
    assert button.trigger_level == 1 - level
    button.handle_interrupt()
    assert button.trigger_level == level


def test_invalid_active_level_rejected():
    with pytest.raises(ValueError):
        GPIOButton(2, lambda: None)
    with pytest.raises(ValueError):
        ButtonSet(1, 2, 3, -1, lambda action: None)


def test_negative_pin_rejected():
    with pytest.raises(ValueError):
        ButtonSet(-1, 2, 3, 0, lambda action: None)


def test_wake_mask_priority_and_none():
    buttons = ButtonSet(4, 5, 6, 0, lambda action: None)
    assert buttons.action_for_wake_mask((1 << 4) | (1 << 6)) is UIAction.UP
    assert buttons.action_for_wake_mask(1 << 5) is UIAction.DOWN
    assert buttons.action_for_wake_mask(1 << 6) is UIAction.SELECT
    assert buttons.action_for_wake_mask(0) is UIAction.NONE
    assert buttons.action_for_wake_mask(1 << 7) is UIAction.NONE


def test_wake_mask_covers_every_pin():
    buttons = ButtonSet(34, 39, 35, 1, lambda action: None)
    for pin, action in ((34, UIAction.UP), (39, UIAction.DOWN), (35, UIAction.SELECT)):
        assert buttons.wake_mask & (1 << pin)
        assert buttons.action_for_wake_mask(buttons.wake_mask & (1 << pin)) is action
    assert buttons.wake_mask == (1 << 34) | (1 << 39) | (1 << 35)


def test_wake_cause_depends_on_active_level():
    low = ButtonSet(1, 2, 3, 0, lambda action: None)
    high = ButtonSet(1, 2, 3, 1, lambda action: None)
    assert low.did_wake_from_deep_sleep(WakeCause.ULP) is True
    assert low.did_wake_from_deep_sleep(WakeCause.EXT1) is False
    assert high.did_wake_from_deep_sleep(WakeCause.EXT1) is True
    assert high.did_wake_from_deep_sleep(WakeCause.ULP) is False
    assert high.did_wake_from_deep_sleep(WakeCause.OTHER) is False


def test_button_set_dispatches_actions():
    actions = []
    buttons = ButtonSet(1, 2, 3, 0, actions.append)
    buttons.select.handle_interrupt()
    time.sleep(BUTTON_DEBOUNCE_US / 1_000_000 + 0.02)
    assert buttons.select.handle_interrupt() is True
    assert actions == [UIAction.SELECT]