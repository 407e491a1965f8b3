#!/usr/bin/env python
"""
Run the Streamlit register screens.

Usage:
    python scripts/run_app.py
"""
import subprocess
import sys
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    ui_path = project_root / 'src' / 'coffee_pos' / 'ui' / 'app_streamlit.py'

    if not ui_path.exists():
        print(f"ERROR: register UI not found at {ui_path}")
        sys.exit(1)

    cmd = [
        sys.executable, '-m', 'streamlit', 'run', str(ui_path),
        '--server.headless', 'true',
        '--browser.gatherUsageStats', 'false',
    ]
    print(f"Starting register: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nRegister stopped.")


if __name__ == "__main__":
    main()
