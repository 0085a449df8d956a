import json
import os
import signal
import subprocess
import sys
import time
import uuid
from typing import Dict

import requests
from libs.config import get_setting

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _wait_health(url: str, timeout_s: int = 15) -> None:
    deadline = time.time() + timeout_s
    while time.time() < deadline:
        try:
            r = requests.get(url, timeout=1)
            if r.status_code == 200:
                return
        except requests.RequestException:
            pass
        time.sleep(0.3)
    raise RuntimeError(f"service not ready: {url}")


def _id(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:12]}"


def _envelope(source: str, typ: str, payload: Dict) -> Dict:
    return {
        "meta": {
            "message_id": _id("m_demo_"),
            "timestamp_ms": int(time.time() * 1000),
            "source": source,
            "type": typ,
            "session_id": "demo",
            "trace": {"trace_id": _id("trace_demo_"), "span_id": _id("span_demo_"), "tags": {}},
        },
        "payload": payload,
    }


def _send(base: str, action: str, timeout: float) -> Dict:
    r = requests.post(f"{base}/command", json=_envelope("driver", "dashboard.command", {"action": action}), timeout=timeout)
    r.raise_for_status()
    data = r.json()
    payload = data.get("payload") or {}
    print(f"{action:>10}: event={payload.get('event')} state={json.dumps(payload.get('state'))}")
    return data


def main() -> None:
    host = str(get_setting("services.host", "127.0.0.1"))
    port = int(get_setting("services.dashboard_port", 8003))
    base = f"http://{host}:{port}"
    timeout = 5.0

    env = os.environ.copy()
    env["PYTHONPATH"] = ROOT + (os.pathsep + env["PYTHONPATH"] if env.get("PYTHONPATH") else "")
    runner = subprocess.Popen([sys.executable, "scripts/run_all.py"], cwd=ROOT, env=env)

    try:
        _wait_health(f"{base}/health")
        # drive ticks by hand so the run is deterministic
        requests.post(f"{base}/ticker/stop", timeout=timeout)

        for _ in range(3):
            _send(base, "accelerate", timeout)
        _send(base, "tick", timeout)
        for _ in range(3):
            _send(base, "brake", timeout)
        _send(base, "tick", timeout)
        _send(base, "refuel", timeout)

        r = requests.get(f"{base}/state", timeout=timeout)
        print("dashboard state:", json.dumps(r.json(), ensure_ascii=False))
    finally:
        try:
            runner.send_signal(signal.SIGINT)
            runner.wait(timeout=8)
        except subprocess.TimeoutExpired:
            runner.terminate()
            runner.wait(timeout=5)


if __name__ == "__main__":
    main()
