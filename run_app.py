"""
Run from project root.
    python run_app.py            # Streamlit dashboard
    python run_app.py api        # FastAPI server (PORT env, default 8000)
"""
import os
import subprocess
import sys

COMMANDS = {
    "dashboard": ["-m", "streamlit", "run", "app.py"],
    "api": ["-m", "uvicorn", "api.server:app", "--host", "0.0.0.0", "--port", os.getenv("PORT", "8000")],
}

target = sys.argv[1] if len(sys.argv) > 1 else "dashboard"
if target not in COMMANDS:
    sys.exit(f"Unknown target {target!r}; choose one of: {', '.join(COMMANDS)}")

root = os.path.dirname(os.path.abspath(__file__))
os.chdir(os.path.join(root, "cv_intake"))
subprocess.run([sys.executable, *COMMANDS[target]], check=True)
