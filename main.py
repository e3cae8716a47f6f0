#!/usr/bin/env python3
"""
Launcher for running from a source checkout: python main.py [--no-keyboard]
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from reaction_floor import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
