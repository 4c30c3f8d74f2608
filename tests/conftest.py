"""Pytest configuration - add project root to path so `src.lift_planner` imports resolve."""
import sys
from pathlib import Path

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))
