import json
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from libs.schema_utils.validate import SchemaValidationError, validate_or_raise
from ..runtime import DASHBOARD_TOPIC, DashboardRuntime

router = APIRouter()

@router.websocket("/ws/dashboard")
async def ws_dashboard(ws: WebSocket):
    rt: DashboardRuntime = ws.app.state.dashboard
    await ws.accept()
    await rt.topics.subscribe(DASHBOARD_TOPIC, ws)
    try:
        await ws.send_text(json.dumps(rt.state_envelope(), ensure_ascii=False))
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
                validate_or_raise("schemas/common/envelope.schema.json", msg)
                validate_or_raise("schemas/dashboard/dashboard_command.schema.json", msg["payload"])
            except (json.JSONDecodeError, SchemaValidationError) as e:
                await ws.send_text(json.dumps({"ok": False, "error": f"bad request: {e}"}, ensure_ascii=False))
                continue

            meta = msg["meta"]
            result = rt.perform(msg["payload"]["action"].strip())
            out = rt.event_envelope(result, meta.get("trace"), meta["session_id"])
            await ws.send_text(json.dumps(out, ensure_ascii=False))
    except WebSocketDisconnect:
        return
    finally:
        await rt.topics.unsubscribe(DASHBOARD_TOPIC, ws)
