#!/usr/bin/env python
"""
Run the register API (FastAPI + uvicorn).

Usage:
    python scripts/run_api.py [port]

COFFEE_POS_* environment variables (tax rate, rounding, log level) are
passed through to the server process.
"""
import subprocess
import sys
import os
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    port = sys.argv[1] if len(sys.argv) > 1 else os.environ.get("COFFEE_POS_PORT", "8000")

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path

    cmd = [
        sys.executable, "-m", "uvicorn",
        "coffee_pos.api.main:app",
        "--host", "0.0.0.0",
        "--port", str(port),
        "--log-level", env.get("COFFEE_POS_LOG_LEVEL", "info").lower(),
        "--reload",
    ]
    print(f"Starting Coffee POS API on port {port}...")
    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
