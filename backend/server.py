"""
API Server - The Bridge Between the Transform Kernel and a Renderer

This server does three things:
1. REST API: Build, compose and apply transforms on request
2. Controls: Accept input actions and keep the interactive transform state
3. WebSocket: Stream per-frame model matrices (column-major) to the renderer

Architecture insight:
The renderer owns the window, the shaders and the draw calls. It only
ever sees 16 floats per frame, already in the order glUniformMatrix4fv
(or a WGSL mat4x4) expects. Everything with real math in it stays here.
"""

from __future__ import annotations
import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import List, Optional, Set

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from xform.vector import Vec3
from xform.matrix import Mat4, transform_all
from xform.pipeline import TransformKind, TransformStep, build_transform
from xform.controls import ControlAction, TransformControls, actions_from_keys
from xform.frames import FrameConfig, FrameLoop

logger = logging.getLogger(__name__)


# ============================================================
# Connection Manager - Handles multiple WebSocket clients
# ============================================================

class ConnectionManager:
    """
    Manages WebSocket connections.

    Why a manager?
    - A renderer and an inspector page can watch the same stream
    - Clean disconnect handling
    - Broadcast to all clients
    """

    def __init__(self):
        self.active_connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.add(websocket)
        logger.info(f"Client connected. Total: {len(self.active_connections)}")

    def disconnect(self, websocket: WebSocket):
        self.active_connections.discard(websocket)
        logger.info(f"Client disconnected. Total: {len(self.active_connections)}")

    async def broadcast(self, message: dict):
        """Send to all connected clients."""
        if not self.active_connections:
            return

        data = json.dumps(message)
        # Send to all, handle disconnects
        disconnected = []
        for connection in self.active_connections:
            try:
                await connection.send_text(data)
            except Exception:
                disconnected.append(connection)

        for conn in disconnected:
            self.disconnect(conn)


# Global instances
manager = ConnectionManager()
controls = TransformControls()
frame_loop: Optional[FrameLoop] = None
stream_task: Optional[asyncio.Task] = None


# ============================================================
# API Models
# ============================================================

class Vec3Model(BaseModel):
    """3D vector for API."""
    x: float
    y: float
    z: float

    def to_vec3(self) -> Vec3:
        return Vec3(self.x, self.y, self.z)


class TransformStepModel(BaseModel):
    """One transform in a pipeline."""
    kind: TransformKind
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    angle: float = 0.0  # degrees

    def to_step(self) -> TransformStep:
        return TransformStep(kind=self.kind, x=self.x, y=self.y, z=self.z, angle=self.angle)


class ComposeRequest(BaseModel):
    """Steps listed in the order they apply to a vector, plus optional vectors to run through."""
    steps: List[TransformStepModel] = []
    points: List[Vec3Model] = []
    directions: List[Vec3Model] = []


class ApplyRequest(BaseModel):
    """Apply an explicit matrix to vectors."""
    rows: List[List[float]]
    vectors: List[Vec3Model]
    mode: str = "point"  # vector, point, direction


class ControlInputRequest(BaseModel):
    """
    Input from the renderer. Either action names or raw key names.

    With dt set, the controls' update rate limit applies; without it the
    actions are applied once immediately.
    """
    actions: List[ControlAction] = []
    keys: List[str] = []
    dt: Optional[float] = None


class StreamRequest(BaseModel):
    """Request body for starting a frame stream."""
    fps: float = 60.0
    real_time: bool = True
    max_frames: Optional[int] = None


# ============================================================
# FastAPI App
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown logic."""
    logger.info("Transform kernel server starting...")
    yield
    logger.info("Server shutting down...")
    # Cancel any running stream
    global stream_task
    if stream_task and not stream_task.done():
        stream_task.cancel()


app = FastAPI(
    title="Transform Kernel",
    description="3D vector/matrix transforms for a rendering client",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for local dev (renderer page on a different port)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In prod, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# REST Endpoints
# ============================================================

@app.get("/")
async def root():
    return {
        "name": "Transform Kernel",
        "version": "0.1.0",
        "status": "streaming" if stream_task and not stream_task.done() else "ready",
    }


@app.get("/transforms")
async def list_transforms():
    """List available transform kinds."""
    return {"kinds": [kind.value for kind in TransformKind]}


@app.post("/compose")
async def compose_transform(request: ComposeRequest):
    """
    Build a matrix from steps given in application order.

    Returns the matrix (rows and column-major) and any requested
    points/directions pushed through it.
    """
    try:
        matrix = build_transform(step.to_step() for step in request.steps)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "matrix": matrix.to_dict(),
        "points": [matrix.transform_point(p.to_vec3()).to_dict() for p in request.points],
        "directions": [matrix.transform_direction(d.to_vec3()).to_dict() for d in request.directions],
    }


@app.post("/apply")
async def apply_matrix(request: ApplyRequest):
    """Apply an explicit 4x4 matrix to a list of vectors."""
    try:
        matrix = Mat4(request.rows)
        results = transform_all(matrix, (v.to_vec3() for v in request.vectors), request.mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "mode": request.mode,
        "vectors": [v.to_dict() for v in results],
    }


@app.get("/controls")
async def get_controls():
    """Current rotation/scale and the resulting model matrix."""
    return controls.to_dict()


@app.post("/controls/input")
async def control_input(request: ControlInputRequest):
    """Apply input actions to the interactive transform."""
    actions = list(request.actions) + actions_from_keys(request.keys)

    if request.dt is not None:
        changed = controls.update(request.dt, actions)
    else:
        changed = controls.apply(actions)

    return {"changed": changed, **controls.to_dict()}


@app.post("/controls/reset")
async def reset_controls():
    controls.reset()
    return controls.to_dict()


@app.get("/transform")
async def get_transform():
    """The current model matrix, flattened column-major for a mat4 uniform."""
    return {"transform": [float(v) for v in controls.transform().to_column_major()]}


@app.post("/stream/start")
async def start_stream(request: StreamRequest = None):
    """
    Start streaming frame events over the WebSocket.

    Any running stream is cancelled first. Returns immediately.
    """
    global frame_loop, stream_task
    request = request or StreamRequest()

    if stream_task and not stream_task.done():
        stream_task.cancel()
        try:
            await stream_task
        except asyncio.CancelledError:
            pass

    try:
        frame_loop = FrameLoop(
            controls,
            FrameConfig(fps=request.fps, real_time=request.real_time, max_frames=request.max_frames),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    frame_loop.on_event(manager.broadcast)
    stream_task = asyncio.create_task(frame_loop.run())

    return {"status": "started", "fps": request.fps, "max_frames": request.max_frames}


@app.post("/stream/stop")
async def stop_stream():
    global stream_task
    if not stream_task or stream_task.done():
        return {"status": "idle"}

    stream_task.cancel()
    try:
        await stream_task
    except asyncio.CancelledError:
        pass

    return {"status": "stopped", "ticks": frame_loop.tick_count if frame_loop else 0}


# ============================================================
# WebSocket Endpoint
# ============================================================

def _streaming() -> bool:
    return frame_loop is not None and stream_task is not None and not stream_task.done()


def _handle_input_message(message: dict) -> None:
    """Route hold/release/press lists to the frame loop (or straight to controls)."""
    hold = [ControlAction(a) for a in message.get("hold", [])]
    release = [ControlAction(a) for a in message.get("release", [])]
    press = [ControlAction(a) for a in message.get("press", [])]
    press.extend(actions_from_keys(message.get("keys", [])))

    if _streaming():
        frame_loop.release(*release)
        frame_loop.hold(*hold)
        frame_loop.press(*press)
    else:
        controls.apply(hold + press)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket for real-time frame streaming.

    The renderer connects here to receive:
    - Frame events (one model matrix per tick)
    - Completion events

    and may send:
    - {"type": "ping"}
    - {"type": "input", "hold": [...], "release": [...], "press": [...], "keys": [...]}
    """
    await manager.connect(websocket)
    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except ValueError as e:
                await websocket.send_text(json.dumps({"type": "error", "detail": f"Invalid JSON: {e}"}))
                continue
            if not isinstance(message, dict):
                await websocket.send_text(json.dumps({"type": "error", "detail": "Message must be a JSON object"}))
                continue
            if message.get("type") == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
            elif message.get("type") == "input":
                try:
                    _handle_input_message(message)
                except (ValueError, TypeError) as e:
                    await websocket.send_text(json.dumps({"type": "error", "detail": str(e)}))
    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
        manager.disconnect(websocket)


# ============================================================
# Main entry point
# ============================================================

if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
