"""
Transform Controls - Turning Key Presses Into a Matrix

The renderer polls its input device and tells us which actions are
active. We keep two scalars:

    rotation: degrees about +Z (unbounded, no wraparound)
    scale:    uniform XY scale, never below min_scale

and rebuild the model matrix from them each frame:

    transform = rotation_z(rotation) @ scale(s, s, 1)

i.e. scale first, then rotate.

KEY CONCEPT: Fixed update rate
Input is applied at most once per update_interval seconds, no matter
how fast frames are coming in. Holding a key on a 240 Hz display
turns the quad at the same speed as on a 60 Hz one.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List
import logging

from .matrix import Mat4

logger = logging.getLogger(__name__)


class ControlAction(str, Enum):
    ROTATE_CCW = "rotate_ccw"
    ROTATE_CW = "rotate_cw"
    SCALE_UP = "scale_up"
    SCALE_DOWN = "scale_down"
    RESET = "reset"


# Key names as reported by the rendering client (DOM KeyboardEvent.code style)
KEY_BINDINGS: Dict[str, ControlAction] = {
    "ArrowLeft": ControlAction.ROTATE_CCW,
    "ArrowUp": ControlAction.ROTATE_CCW,
    "ArrowRight": ControlAction.ROTATE_CW,
    "ArrowDown": ControlAction.ROTATE_CW,
    "Equal": ControlAction.SCALE_UP,
    "NumpadAdd": ControlAction.SCALE_UP,
    "Minus": ControlAction.SCALE_DOWN,
    "NumpadSubtract": ControlAction.SCALE_DOWN,
    "KeyR": ControlAction.RESET,
}


def actions_from_keys(keys: Iterable[str]) -> List[ControlAction]:
    """
    Map key names to actions, dropping keys that are not bound.

    One action per key: holding ArrowLeft and ArrowUp together rotates
    twice as fast as either alone.
    """
    actions = []
    for key in keys:
        action = KEY_BINDINGS.get(key)
        if action is not None:
            actions.append(action)
    return actions


@dataclass
class ControlConfig:
    """Configuration for interactive transform controls."""
    rotation_step: float = 0.5      # degrees per update
    scale_step: float = 0.01        # scale units per update
    min_scale: float = 0.1          # scale never drops below this
    update_interval: float = 0.016  # seconds between updates (~60 Hz)
    initial_rotation: float = 0.0   # degrees
    initial_scale: float = 1.0


class TransformControls:
    """
    Rotation/scale state driven by input actions.

    update() is what a frame loop calls; apply() skips the rate limit
    and is what one-shot callers (REST handlers, tests) use.
    """

    def __init__(self, config: ControlConfig = None):
        self.config = config or ControlConfig()
        self.rotation = self.config.initial_rotation
        self.scale = self.config.initial_scale
        self._time_since_update = 0.0

    def update(self, dt: float, actions: Iterable[ControlAction]) -> bool:
        """
        Advance the update clock by dt and apply actions if an update is due.

        Returns True if rotation or scale changed.
        """
        self._time_since_update += dt
        if self._time_since_update < self.config.update_interval:
            return False

        self._time_since_update = 0.0
        return self.apply(actions)

    def apply(self, actions: Iterable[ControlAction]) -> bool:
        """Apply actions immediately. Returns True if state changed."""
        changed = False

        for action in actions:
            action = ControlAction(action)
            if action == ControlAction.ROTATE_CCW:
                self.rotation += self.config.rotation_step
                changed = True
            elif action == ControlAction.ROTATE_CW:
                self.rotation -= self.config.rotation_step
                changed = True
            elif action == ControlAction.SCALE_UP:
                self.scale += self.config.scale_step
                changed = True
            elif action == ControlAction.SCALE_DOWN:
                self.scale = max(self.config.min_scale, self.scale - self.config.scale_step)
                changed = True
            elif action == ControlAction.RESET:
                self.reset()
                changed = True

        if changed:
            logger.debug(f"Rotation: {self.rotation:.1f} deg, Scale: {self.scale:.2f}")
        return changed

    def reset(self) -> None:
        """Back to the initial rotation and scale."""
        self.rotation = self.config.initial_rotation
        self.scale = self.config.initial_scale
        self._time_since_update = 0.0
        logger.info("Transformations reset")

    def transform(self) -> Mat4:
        """Model matrix for the current state: scale first, then rotate."""
        scale_matrix = Mat4.scale(self.scale, self.scale, 1.0)
        rotation_matrix = Mat4.rotation_z(self.rotation)
        return rotation_matrix @ scale_matrix

    def to_dict(self) -> dict:
        """Serialize current state for transmission."""
        return {
            "rotation": self.rotation,
            "scale": self.scale,
            "transform": self.transform().to_dict(),
        }
