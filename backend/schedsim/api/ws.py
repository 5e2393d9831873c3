from typing import Any, Dict

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from schedsim.engine import StalledSimulationError
from schedsim.session import (
    get_state,
    init_session,
    reset_session,
    run_session,
    set_config,
    tick_session,
)

router = APIRouter()


async def _send_state(ws: WebSocket) -> None:
    await ws.send_json({"type": "state", "data": get_state()})


@router.websocket("/ws/state")
async def ws_state(websocket: WebSocket) -> None:
    await websocket.accept()
    await _send_state(websocket)

    try:
        while True:
            msg: Dict[str, Any] = await websocket.receive_json()
            mtype = str(msg.get("type", "")).lower()

            try:
                if mtype == "init":
                    payload = dict(msg)
                    payload.pop("type", None)
                    init_session(payload)
                elif mtype == "tick":
                    tick_session()
                elif mtype == "run":
                    run_session(int(msg.get("steps", 1)))
                elif mtype == "finish":
                    run_session(None)
                elif mtype == "config":
                    set_config(msg)
                elif mtype == "reset":
                    reset_session()
                else:
                    await websocket.send_json({"type": "error", "detail": f"unknown message type {mtype!r}"})
                    continue
            except (TypeError, ValueError, StalledSimulationError) as exc:
                await websocket.send_json({"type": "error", "detail": str(exc)})
                continue

            await _send_state(websocket)
    except WebSocketDisconnect:
        return
