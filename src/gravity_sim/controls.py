# MIT License (see LICENSE)
"""
Discrete input model: directions, commands and the interaction state machine.

Device handling (keyboard, mouse, windowing) lives outside this package. An
input layer translates device events into ``Command`` or ``Direction``
values and feeds them to ``Status.apply`` (usually through
``Simulator.apply``). The state machine below decides what the next
``Simulator.update`` does:

    RESET       → MOVE
    MOVE        → ADD (ADD) | REMOVE (REMOVE) | TRANSLATE (TOGGLE_TRANSLATE)
    TRANSLATE   → MOVE (TOGGLE_TRANSLATE)
    ADD         → WAIT_DROP
    REMOVE      → MOVE
    WAIT_DROP   → WAIT_SPEED (CONFIRM) | CANCEL_DROP (CANCEL)
    WAIT_SPEED  → MOVE (CONFIRM) | WAIT_DROP (CANCEL)
    CANCEL_DROP → MOVE
    any         → RESET (RESET)

States without a listed trigger advance on the next event of any kind,
including the empty event the simulator sends after every update.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum

from .vector import Vector2

_DIAGONAL = 1.0 / math.sqrt(2.0)


class Direction(Enum):
    """Eight-way direction of an interactive nudge, or HOLD for none."""
    HOLD = "hold"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    UP_LEFT = "up_left"
    UP_RIGHT = "up_right"
    DOWN_LEFT = "down_left"
    DOWN_RIGHT = "down_right"

    def as_vector(self) -> Vector2:
        """Unit vector in world coordinates (y up); zero for HOLD."""
        return _VECTORS[self]

    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    def is_opposite(self, other: "Direction") -> bool:
        return _OPPOSITES[self] is other


_VECTORS = {
    Direction.HOLD: Vector2(0.0, 0.0),
    Direction.UP: Vector2(0.0, 1.0),
    Direction.DOWN: Vector2(0.0, -1.0),
    Direction.LEFT: Vector2(-1.0, 0.0),
    Direction.RIGHT: Vector2(1.0, 0.0),
    Direction.UP_LEFT: Vector2(-_DIAGONAL, _DIAGONAL),
    Direction.UP_RIGHT: Vector2(_DIAGONAL, _DIAGONAL),
    Direction.DOWN_LEFT: Vector2(-_DIAGONAL, -_DIAGONAL),
    Direction.DOWN_RIGHT: Vector2(_DIAGONAL, -_DIAGONAL),
}

# HOLD is its own opposite
_OPPOSITES = {
    Direction.HOLD: Direction.HOLD,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.UP_LEFT: Direction.DOWN_RIGHT,
    Direction.DOWN_RIGHT: Direction.UP_LEFT,
    Direction.UP_RIGHT: Direction.DOWN_LEFT,
    Direction.DOWN_LEFT: Direction.UP_RIGHT,
}


class Command(Enum):
    """Discrete user intents understood by Status and Simulator."""
    RESET = "reset"
    ADD = "add"
    REMOVE = "remove"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    TOGGLE_TRANSLATE = "toggle_translate"
    TOGGLE_BOUNDED = "toggle_bounded"
    TOGGLE_TRAJECTORY = "toggle_trajectory"
    TOGGLE_PAUSE = "toggle_pause"
    TOGGLE_EJECT = "toggle_eject"
    SELECT_NEXT = "select_next"
    SELECT_PREVIOUS = "select_previous"
    NEXT_FRAME = "next_frame"
    INCREASE_OVERSAMPLING = "increase_oversampling"
    DECREASE_OVERSAMPLING = "decrease_oversampling"
    INCREASE_DISTANCE = "increase_distance"
    DECREASE_DISTANCE = "decrease_distance"
    INCREASE_TIME = "increase_time"
    DECREASE_TIME = "decrease_time"


class State(Enum):
    MOVE = "move"
    TRANSLATE = "translate"
    ADD = "add"
    REMOVE = "remove"
    WAIT_DROP = "wait_drop"
    WAIT_SPEED = "wait_speed"
    CANCEL_DROP = "cancel_drop"
    RESET = "reset"

    def next(self, command: Command | None = None) -> "State":
        """State reached from this one when ``command`` (or nothing) arrives."""
        if command is Command.RESET:
            return State.RESET

        if self in _TRANSIENT:
            return _TRANSIENT[self]
        return _TRIGGERED.get((self, command), self)


_TRANSIENT = {
    State.RESET: State.MOVE,
    State.ADD: State.WAIT_DROP,
    State.REMOVE: State.MOVE,
    State.CANCEL_DROP: State.MOVE,
}

_TRIGGERED = {
    (State.MOVE, Command.ADD): State.ADD,
    (State.MOVE, Command.REMOVE): State.REMOVE,
    (State.MOVE, Command.TOGGLE_TRANSLATE): State.TRANSLATE,
    (State.TRANSLATE, Command.TOGGLE_TRANSLATE): State.MOVE,
    (State.WAIT_DROP, Command.CONFIRM): State.WAIT_SPEED,
    (State.WAIT_DROP, Command.CANCEL): State.CANCEL_DROP,
    (State.WAIT_SPEED, Command.CONFIRM): State.MOVE,
    (State.WAIT_SPEED, Command.CANCEL): State.WAIT_DROP,
}


@dataclass
class Status:
    """
    Interaction status: the held direction and the current state.

    Attributes:
        direction: Direction of the last event; any non-direction event
                   releases it back to HOLD.
        state: Current state of the interaction state machine.
    """
    direction: Direction = Direction.HOLD
    state: State = State.RESET

    def apply(self, event: Command | Direction | None = None) -> State:
        """Feed one event and return the new state."""
        if isinstance(event, Direction):
            self.direction = event
            self.state = self.state.next(None)
        else:
            self.direction = Direction.HOLD
            self.state = self.state.next(event)
        return self.state

    def is_waiting_to_add(self) -> bool:
        """True while a new body is being placed and must not become the selection."""
        return self.state in (State.WAIT_DROP, State.WAIT_SPEED)
