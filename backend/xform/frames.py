"""
Frame Loop - Streaming Transforms to a Renderer

KEY CONCEPT: Fixed Timestep Frames

The renderer draws whenever it likes, but the transform only advances
in fixed ticks (dt = 1 / fps). Each tick:

1. Apply one-shot actions (pressed since the last tick)
2. Feed held actions to the controls' rate-limited update
3. Rebuild the model matrix
4. Emit a frame event carrying the matrix in column-major order

The matrix in the event is ready to upload as a mat4 uniform as-is:
no transposing on the client side.
"""

from __future__ import annotations
import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Set
import logging

from .controls import ControlAction, TransformControls

logger = logging.getLogger(__name__)


class FrameStatus(str, Enum):
    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class FrameConfig:
    """Configuration for a frame stream."""
    fps: float = 60.0                 # ticks per second
    real_time: bool = True            # try to match wall-clock time
    max_frames: Optional[int] = None  # None = run until cancelled

    @property
    def dt(self) -> float:
        return 1.0 / self.fps


class FrameLoop:
    """
    Drives TransformControls at a fixed rate and emits frame events.

    Responsibilities:
    1. Track held and pressed actions between ticks
    2. Run the fixed-timestep loop (optionally real-time paced)
    3. Emit events for WebSocket broadcast
    """

    def __init__(
        self,
        controls: Optional[TransformControls] = None,
        config: Optional[FrameConfig] = None,
    ):
        if config is not None and config.fps <= 0:
            raise ValueError(f"fps must be positive, got {config.fps}")

        self.controls = controls or TransformControls()
        self.config = config or FrameConfig()
        self.status = FrameStatus.READY
        self.tick_count = 0
        self._held: Set[ControlAction] = set()
        self._pressed: List[ControlAction] = []
        self._event_handlers: list[Callable[[dict], Awaitable[None]]] = []

    def on_event(self, handler: Callable[[dict], Awaitable[None]]) -> None:
        """Register an event handler (for WebSocket broadcast, logging, etc)."""
        self._event_handlers.append(handler)

    async def _emit_event(self, event: dict) -> None:
        """Send event to all registered handlers."""
        for handler in self._event_handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(f"Event handler error: {e}")

    def hold(self, *actions: ControlAction) -> None:
        """Mark actions as held; they apply on every update until released."""
        for action in actions:
            self._held.add(ControlAction(action))

    def release(self, *actions: ControlAction) -> None:
        for action in actions:
            self._held.discard(ControlAction(action))

    def press(self, *actions: ControlAction) -> None:
        """Queue actions that apply exactly once, on the next tick."""
        self._pressed.extend(ControlAction(action) for action in actions)

    @property
    def held(self) -> Set[ControlAction]:
        return set(self._held)

    def frame_event(self) -> dict:
        """Current state as a frame event."""
        return {
            "type": "frame",
            "tick": self.tick_count,
            "ts": time.time(),
            "rotation": self.controls.rotation,
            "scale": self.controls.scale,
            "transform": [float(v) for v in self.controls.transform().to_column_major()],
        }

    async def tick(self) -> None:
        """Advance one fixed timestep and emit a frame event."""
        if self._pressed:
            pressed, self._pressed = self._pressed, []
            self.controls.apply(pressed)

        self.controls.update(self.config.dt, sorted(self._held))
        self.tick_count += 1

        await self._emit_event(self.frame_event())

    def _complete_event(self, result: str) -> dict:
        return {
            "type": "complete",
            "ts": time.time(),
            "result": result,
            "ticks": self.tick_count,
        }

    async def run(self) -> int:
        """
        Run the loop until max_frames (or forever, until cancelled).

        Returns the number of ticks run. Cancellation emits a "stopped"
        completion event and re-raises.
        """
        self.status = FrameStatus.RUNNING
        logger.info(f"Frame loop started at {self.config.fps:.0f} fps")

        wall_start = time.monotonic()
        start_tick = self.tick_count

        try:
            while self.config.max_frames is None or self.tick_count - start_tick < self.config.max_frames:
                await self.tick()

                # Real-time pacing
                if self.config.real_time:
                    expected_wall = (self.tick_count - start_tick) * self.config.dt
                    actual_wall = time.monotonic() - wall_start
                    sleep_time = expected_wall - actual_wall
                    if sleep_time > 0:
                        await asyncio.sleep(sleep_time)
                else:
                    # Still yield so other tasks (WebSocket readers) get a turn
                    await asyncio.sleep(0)

        except asyncio.CancelledError:
            self.status = FrameStatus.COMPLETED
            try:
                await asyncio.shield(self._emit_event(self._complete_event("stopped")))
            except asyncio.CancelledError:
                pass
            logger.info(f"Frame loop stopped after {self.tick_count} ticks")
            raise

        self.status = FrameStatus.COMPLETED
        await self._emit_event(self._complete_event("finished"))
        logger.info(f"Frame loop finished after {self.tick_count} ticks")
        return self.tick_count
