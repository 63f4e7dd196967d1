#!/usr/bin/env python3
"""Direct launcher for the BalanceBeam dashboard.

This script launches Streamlit on ``balancebeam/dashboard.py`` with the
project root on the child process's ``PYTHONPATH``.
"""

import os
import sys
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

project_root = Path(__file__).parent.resolve()
dashboard_path = project_root / "balancebeam" / "dashboard.py"


def streamlit_env(environ: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Copy of ``environ`` with the project root prepended to ``PYTHONPATH``."""
    env = dict(os.environ if environ is None else environ)
    existing = env.get("PYTHONPATH")
    env["PYTHONPATH"] = os.pathsep.join([str(project_root), existing]) if existing else str(project_root)
    return env


def main(argv: Optional[List[str]] = None) -> int:
    extra = sys.argv[1:] if argv is None else argv
    command = [sys.executable, "-m", "streamlit", "run", str(dashboard_path), *extra]
    return subprocess.run(command, cwd=project_root, env=streamlit_env()).returncode


if __name__ == "__main__":
    raise SystemExit(main())
