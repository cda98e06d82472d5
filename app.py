"""
Alternate entry point: `streamlit run app.py` renders the recipe catalog home
page defined in Welcome.py.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

import Welcome  # noqa: E402,F401
