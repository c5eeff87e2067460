"""
DataFlow Analytics launcher
Starts the API and the Streamlit dashboard side by side.

    python app.py
"""

import atexit
import os
import signal
import subprocess
import sys
import time
import webbrowser

import requests

API_PORT = int(os.getenv("DATAFLOW_API_PORT", "8000"))
UI_PORT = int(os.getenv("DATAFLOW_UI_PORT", "8501"))

_processes = []


def cleanup():
    for proc in _processes:
        if proc.poll() is not None:
            continue
        try:
            if sys.platform == "win32":
                subprocess.run(
                    ["taskkill", "/F", "/T", "/PID", str(proc.pid)],
                    capture_output=True
                )
            else:
                os.killpg(os.getpgid(proc.pid), signal.SIGTERM)
        except (OSError, subprocess.SubprocessError):
            proc.kill()


def signal_handler(signum, frame):
    print("\n\nShutting down...")
    cleanup()
    sys.exit(0)


def spawn(args, cwd, env=None):
    kwargs = {} if sys.platform == "win32" else {"start_new_session": True}
    proc = subprocess.Popen(
        [sys.executable, "-m", *args],
        cwd=cwd,
        env={**os.environ, **(env or {})},
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        **kwargs,
    )
    _processes.append(proc)
    return proc


def wait_for_api(url: str, proc, timeout: float = 20.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if proc.poll() is not None:
            return False
        try:
            if requests.get(url, timeout=1).ok:
                return True
        except requests.exceptions.RequestException:
            pass
        time.sleep(0.5)
    return False


def main():
    print("\nStarting DataFlow Analytics...\n")

    atexit.register(cleanup)
    signal.signal(signal.SIGINT, signal_handler)
    if sys.platform != "win32":
        signal.signal(signal.SIGTERM, signal_handler)

    root = os.path.dirname(os.path.abspath(__file__))

    print("Starting API...")
    api = spawn(
        ["uvicorn", "dataflow_api.main:app", "--reload", "--port", str(API_PORT)],
        root,
    )
    if not wait_for_api(f"http://localhost:{API_PORT}/health", api):
        print("API did not become healthy; continuing anyway")

    print("Starting dashboard...")
    ui = spawn(
        ["streamlit", "run", os.path.join("dataflow_ui", "app.py"),
         "--server.headless", "true", "--server.port", str(UI_PORT)],
        root,
        env={"DATAFLOW_BACKEND_URL": f"http://localhost:{API_PORT}"},
    )

    print(f"\nAPI:       http://localhost:{API_PORT}/docs")
    print(f"Dashboard: http://localhost:{UI_PORT}")
    print("\nPress Ctrl+C to stop\n")

    time.sleep(2)
    webbrowser.open(f"http://localhost:{UI_PORT}")

    try:
        while True:
            if api.poll() is not None:
                print("API stopped unexpectedly")
                break
            if ui.poll() is not None:
                print("Dashboard stopped unexpectedly")
                break
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        cleanup()


if __name__ == "__main__":
    main()
