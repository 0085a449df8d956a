from fastapi import APIRouter, HTTPException, Request
from libs.schema_utils.validate import SchemaValidationError, validate_or_raise
from ..runtime import DashboardRuntime

router = APIRouter()

def _runtime(request: Request) -> DashboardRuntime:
    return request.app.state.dashboard

# Handlers touching the simulation are async so they run on the event loop
# thread, the same one the tick driver uses.

@router.get("/health")
def health():
    return {"ok": True}

@router.get("/state")
async def get_state(request: Request):
    return _runtime(request).state_envelope()

@router.post("/command")
async def command(req: dict, request: Request):
    meta = req.get("meta") or {}
    cmd = req.get("payload") or {}
    try:
        validate_or_raise("schemas/common/command_meta.schema.json", meta)
        validate_or_raise("schemas/dashboard/dashboard_command.schema.json", cmd)
    except SchemaValidationError as e:
        raise HTTPException(status_code=400, detail=f"bad request: {e}") from e

    rt = _runtime(request)
    result = rt.perform(cmd["action"].strip())
    return rt.event_envelope(result, meta.get("trace"), meta.get("session_id", "demo"))

@router.post("/accelerate")
async def accelerate(request: Request):
    rt = _runtime(request)
    return rt.event_envelope(rt.controller.accelerate())

@router.post("/brake")
async def brake(request: Request):
    rt = _runtime(request)
    return rt.event_envelope(rt.controller.brake())

@router.post("/refuel")
async def refuel(request: Request):
    rt = _runtime(request)
    return rt.event_envelope(rt.controller.refuel())

@router.get("/ticker")
async def ticker_status(request: Request):
    return _runtime(request).ticker.status()

@router.post("/ticker/start")
async def ticker_start(request: Request):
    ticker = _runtime(request).ticker
    changed = ticker.start()
    return {"changed": changed, **ticker.status()}

@router.post("/ticker/stop")
async def ticker_stop(request: Request):
    ticker = _runtime(request).ticker
    changed = await ticker.stop()
    return {"changed": changed, **ticker.status()}
