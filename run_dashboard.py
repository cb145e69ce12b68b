#!/usr/bin/env python3
"""Launcher for the budget dashboard.

Runs Streamlit from the budget_dashboard directory so the pages/
subdirectory is picked up automatically.
"""

import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.resolve()
app_dir = project_root / "budget_dashboard"

if __name__ == "__main__":
    os.chdir(app_dir)
    sys.path.insert(0, str(project_root))
    sys.exit(subprocess.run([sys.executable, "-m", "streamlit", "run", "Home.py"]).returncode)
