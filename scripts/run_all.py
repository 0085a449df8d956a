import os
import subprocess
import sys
import time

from services.dashboard_service.runtime import DashboardSettings

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

SETTINGS = DashboardSettings.from_config()

SERVICES = [
    ("dashboard_service", "services.dashboard_service.app:app", SETTINGS.port),
]

def main():
    procs = []
    env = os.environ.copy()
    # ROOT must be on sys.path so services/ and libs/ import
    env["PYTHONPATH"] = ROOT + (os.pathsep + env["PYTHONPATH"] if env.get("PYTHONPATH") else "")

    for name, app, port in SERVICES:
        cmd = [
            sys.executable, "-m", "uvicorn", app,
            "--host", SETTINGS.host,
            "--port", str(port),
        ]
        print(f"Starting {name} on :{port} ...")
        procs.append(subprocess.Popen(cmd, cwd=ROOT, env=env))

    print("\nAll services started. Press Ctrl+C to stop.\n")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nStopping...")
        for p in procs:
            p.terminate()
        for p in procs:
            try:
                p.wait(timeout=10)
            except subprocess.TimeoutExpired:
                p.kill()

if __name__ == "__main__":
    main()
