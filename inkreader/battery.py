"""Battery monitoring: voltage reading and charge estimate."""

from __future__ import annotations

import abc
import math
from collections.abc import Callable

__all__ = ["Battery", "ADCBattery", "voltage_to_percentage"]

_FULL_VOLTS = 4.20
_EMPTY_VOLTS = 3.50
_DIVIDER_RATIO = 2


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def voltage_to_percentage(voltage_mv: float) -> int:
    """Estimate the charge of a Li-ion cell from its voltage in millivolts."""
    volts = voltage_mv / 1000.0
    if volts >= _FULL_VOLTS:
        return 100
    if volts <= _EMPTY_VOLTS:
        return 0
    return _round_half_away(
        2836.9625 * volts ** 4
        - 43987.4889 * volts ** 3
        + 255233.8134 * volts ** 2
        - 656689.7123 * volts
        + 632041.7303
    )


class Battery(abc.ABC):
    """A source of battery voltage and charge level."""

    @abc.abstractmethod
    def setup(self) -> None:
        """Prepare the hardware for reading."""

    @property
    @abc.abstractmethod
    def voltage(self) -> float:
        """Battery voltage in millivolts."""

    @property
    def percentage(self) -> int:
        """Estimated charge in percent."""
        return voltage_to_percentage(self.voltage)


class ADCBattery(Battery):
    """Battery measured through an ADC behind a 1:2 voltage divider.

    ``read_millivolts`` returns the calibrated voltage seen at the ADC pin.
    """

    def __init__(self, read_millivolts: Callable[[], float]) -> None:
        self._read_millivolts = read_millivolts
        self._ready = False

    def setup(self) -> None:
        self._ready = True

    @property
    def voltage(self) -> float:
        if not self._ready:
            raise RuntimeError("battery ADC has not been set up")
        return float(_DIVIDER_RATIO * self._read_millivolts())