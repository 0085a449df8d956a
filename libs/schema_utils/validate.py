from typing import Any, Dict


class SchemaValidationError(ValueError):
    pass


def _ensure(cond: bool, msg: str) -> None:
    if not cond:
        raise SchemaValidationError(msg)


def _validate_envelope(obj: Dict[str, Any]) -> None:
    _ensure(isinstance(obj, dict), "envelope must be an object")
    _ensure("meta" in obj and "payload" in obj, "envelope requires meta and payload")

    meta = obj["meta"]
    payload = obj["payload"]
    _ensure(isinstance(meta, dict), "meta must be an object")
    _ensure(isinstance(payload, dict), "payload must be an object")

    required_meta = ["message_id", "timestamp_ms", "source", "type", "session_id", "trace"]
    for k in required_meta:
        _ensure(k in meta, f"meta.{k} is required")

    _ensure(isinstance(meta["message_id"], str) and len(meta["message_id"]) >= 8, "invalid meta.message_id")
    _ensure(isinstance(meta["timestamp_ms"], int) and meta["timestamp_ms"] >= 0, "invalid meta.timestamp_ms")
    _ensure(isinstance(meta["type"], str) and len(meta["type"]) > 0, "invalid meta.type")
    _ensure(isinstance(meta["session_id"], str) and len(meta["session_id"]) > 0, "invalid meta.session_id")

    source = meta["source"]
    _ensure(source in {"dashboard", "driver", "ui", "test"}, "invalid meta.source")

    trace = meta["trace"]
    _ensure(isinstance(trace, dict), "meta.trace must be an object")
    _ensure(isinstance(trace.get("trace_id"), str) and len(trace["trace_id"]) >= 8, "invalid trace.trace_id")
    _ensure(isinstance(trace.get("span_id"), str) and len(trace["span_id"]) >= 8, "invalid trace.span_id")


def _validate_command_meta(obj: Dict[str, Any]) -> None:
    # HTTP callers may send a partial meta; only what is present is checked
    _ensure(isinstance(obj, dict), "meta must be an object")
    if obj.get("trace") is not None:
        _ensure(isinstance(obj["trace"], dict), "meta.trace must be an object")
    if "session_id" in obj:
        _ensure(isinstance(obj["session_id"], str) and len(obj["session_id"]) > 0, "invalid meta.session_id")


def _validate_dashboard_command(obj: Dict[str, Any]) -> None:
    _ensure(isinstance(obj, dict), "dashboard command must be object")
    action = obj.get("action")
    _ensure(isinstance(action, str) and len(action.strip()) > 0, "payload.action is required")
    if "args" in obj:
        # actions take no arguments; tolerate an empty object from generic clients
        _ensure(isinstance(obj["args"], dict) and not obj["args"], "payload.args must be empty")


def validate_or_raise(schema_path: str, obj: Dict[str, Any]) -> None:
    if schema_path == "schemas/common/envelope.schema.json":
        _validate_envelope(obj)
    elif schema_path == "schemas/common/command_meta.schema.json":
        _validate_command_meta(obj)
    elif schema_path == "schemas/dashboard/dashboard_command.schema.json":
        _validate_dashboard_command(obj)
    else:
        raise SchemaValidationError(f"unsupported schema validator: {schema_path}")
