#!/usr/bin/env python3
"""Toggle the Elm debugger overlay for `lamdera live` in this project.

Lamdera reads `.lamdera/debugger` on startup; its presence hides the overlay.
"""

import sys
from pathlib import Path

MARKER = Path(".lamdera") / "debugger"


def main() -> int:
    if not Path("elm.json").exists():
        print("Run this from the root of a Lamdera project (elm.json not found).")
        return 1

    if MARKER.exists():
        MARKER.unlink()
        print("Elm debugger enabled. Restart lamdera live to apply.")
    else:
        MARKER.parent.mkdir(exist_ok=True)
        MARKER.write_text("off\n")
        print("Elm debugger disabled. Restart lamdera live to apply.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
