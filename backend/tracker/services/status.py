from enum import Enum
from typing import Optional, Union

Number = Union[int, float]


class Status(str, Enum):
    GOOD = "Good"
    BAD = "Bad"
    NO_DATA = "No Data"


def _is_missing(x) -> bool:
    return x is None or (isinstance(x, str) and x.strip() == "")


def evaluate_status(
    value: Optional[Number],
    goal: Optional[Number],
    is_above_good: bool,
) -> Status:
    """Compare a week's value to its goal under the metric's polarity.

    Meeting the goal exactly counts as good for both polarities.
    Example: evaluate_status(9, 10, True) -> Status.BAD
    """
    if _is_missing(value) or _is_missing(goal):
        return Status.NO_DATA

    value, goal = float(value), float(goal)
    if is_above_good:
        return Status.GOOD if value >= goal else Status.BAD
    return Status.GOOD if value <= goal else Status.BAD
