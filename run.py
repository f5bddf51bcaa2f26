#!/usr/bin/env python3
"""Runs MeshSniff from a source checkout without installing it."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))


if __name__ == "__main__":
    try:
        from meshsniff.application.main import main
    except ImportError as e:
        sys.exit(f"meshsniff could not be imported ({e}); is `pip install -e .` done?")
    main(sys.argv[1:])
