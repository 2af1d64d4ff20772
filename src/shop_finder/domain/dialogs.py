"""Domain models for multi-step chat dialogs."""

import re
from dataclasses import dataclass, field, replace
from enum import Enum


class Action(Enum):
    """Dialog flows a chat can be in."""

    ADD_SHOP = "add_shop"
    FIND_SHOPS = "find_shops"


class Step(Enum):
    """Input a dialog is waiting for."""

    NAME = "name"
    STREET = "street"
    CITY = "city"
    STATE = "state"
    ZIP = "zip"
    RADIUS = "radius"
    TYPE = "type"


STEP_SEQUENCES: dict[Action, tuple[Step, ...]] = {
    Action.ADD_SHOP: (
        Step.NAME,
        Step.STREET,
        Step.CITY,
        Step.STATE,
        Step.ZIP,
        Step.TYPE,
    ),
    Action.FIND_SHOPS: (Step.ZIP, Step.RADIUS, Step.TYPE),
}


def first_step(action: Action) -> Step:
    """Return the step a new dialog starts at."""
    return STEP_SEQUENCES[action][0]


def next_step(action: Action, step: Step) -> Step | None:
    """Return the step after ``step``, or None when it is the last one."""
    sequence = STEP_SEQUENCES[action]
    index = sequence.index(step)
    if index + 1 < len(sequence):
        return sequence[index + 1]
    return None


@dataclass(frozen=True)
class DialogSession:
    """Ephemeral per-chat dialog state."""

    action: Action
    step: Step
    data: dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.step not in STEP_SEQUENCES[self.action]:
            raise ValueError(f"{self.step.value} is not a step of {self.action.value}")

    @classmethod
    def start(cls, action: Action) -> "DialogSession":
        return cls(action=action, step=first_step(action))

    def advance(self, **collected: object) -> "DialogSession":
        """Return a copy moved to the next step with extra collected fields."""
        following = next_step(self.action, self.step)
        if following is None:
            raise ValueError(f"{self.action.value} has no step after {self.step.value}")
        return replace(self, step=following, data={**self.data, **collected})


@dataclass(frozen=True)
class RadiusParsed:
    miles: int


@dataclass(frozen=True)
class RadiusInvalid:
    text: str


RadiusInput = RadiusParsed | RadiusInvalid

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_radius(text: str) -> RadiusInput:
    """Parse the leading integer of a radius reply ("50 miles" -> 50)."""
    match = _LEADING_INT.match(text)
    if match is None:
        return RadiusInvalid(text=text)
    return RadiusParsed(miles=int(match.group(1)))
