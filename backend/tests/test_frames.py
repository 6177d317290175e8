"""Tests for xform.frames - the fixed-timestep frame loop."""

import asyncio
import pytest

from xform.controls import ControlAction, TransformControls
from xform.frames import FrameConfig, FrameLoop, FrameStatus
from xform.matrix import Mat4


def run_loop(loop: FrameLoop):
    events = []

    async def collect(event: dict):
        events.append(event)

    loop.on_event(collect)
    ticks = asyncio.run(loop.run())
    return ticks, events


class TestFrameLoop:
    def test_runs_max_frames(self):
        loop = FrameLoop(config=FrameConfig(real_time=False, max_frames=3))
        ticks, events = run_loop(loop)

        assert ticks == 3
        assert [e["type"] for e in events] == ["frame", "frame", "frame", "complete"]
        assert events[-1]["result"] == "finished"
        assert loop.status == FrameStatus.COMPLETED

    def test_frame_carries_column_major_matrix(self):
        loop = FrameLoop(config=FrameConfig(real_time=False, max_frames=1))
        _, events = run_loop(loop)

        frame = events[0]
        assert frame["tick"] == 1
        assert frame["transform"] == [float(v) for v in Mat4.identity().to_column_major()]

    def test_held_actions_apply_every_tick(self):
        loop = FrameLoop(config=FrameConfig(real_time=False, max_frames=4))
        loop.hold(ControlAction.ROTATE_CCW)
        _, events = run_loop(loop)

        assert [e["rotation"] for e in events[:4]] == [0.5, 1.0, 1.5, 2.0]

    def test_release(self):
        loop = FrameLoop(config=FrameConfig(real_time=False, max_frames=2))
        loop.hold(ControlAction.ROTATE_CCW, ControlAction.SCALE_UP)
        loop.release(ControlAction.SCALE_UP)
        assert loop.held == {ControlAction.ROTATE_CCW}
        _, events = run_loop(loop)
        assert events[1]["scale"] == 1.0

    def test_pressed_actions_apply_once(self):
        controls = TransformControls()
        loop = FrameLoop(controls, FrameConfig(real_time=False, max_frames=3))
        loop.press(ControlAction.ROTATE_CW)
        _, events = run_loop(loop)

        assert [e["rotation"] for e in events[:3]] == [-0.5, -0.5, -0.5]

    def test_reset_press(self):
        controls = TransformControls()
        controls.apply([ControlAction.SCALE_UP] * 5)
        loop = FrameLoop(controls, FrameConfig(real_time=False, max_frames=1))
        loop.press("reset")
        _, events = run_loop(loop)
        assert events[0]["scale"] == 1.0

    def test_failing_handler_does_not_stop_loop(self):
        loop = FrameLoop(config=FrameConfig(real_time=False, max_frames=2))

        async def broken(event: dict):
            raise RuntimeError("renderer went away")

        loop.on_event(broken)
        ticks, events = run_loop(loop)
        assert ticks == 2
        assert len(events) == 3

    def test_cancel_emits_stopped(self):
        loop = FrameLoop(config=FrameConfig(fps=120.0, real_time=True))
        events = []

        async def collect(event: dict):
            events.append(event)

        loop.on_event(collect)

        async def scenario():
            task = asyncio.create_task(loop.run())
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())

        assert events[-1]["type"] == "complete"
        assert events[-1]["result"] == "stopped"
        assert loop.status == FrameStatus.COMPLETED

    def test_invalid_fps(self):
        with pytest.raises(ValueError):
            FrameLoop(config=FrameConfig(fps=0))

    def test_dt(self):
        assert FrameConfig(fps=50.0).dt == pytest.approx(0.02)
