"""User interface actions produced by buttons and touch controls."""

from __future__ import annotations

import enum
from collections.abc import Callable

__all__ = ["UIAction", "ActionCallback"]


class UIAction(enum.IntEnum):
    """What the user asked the interface to do."""

    NONE = 0
    UP = 1
    DOWN = 2
    SELECT = 3
    LAST_INTERACTION = 4


ActionCallback = Callable[[UIAction], None]