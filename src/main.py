"""Script de ejecución para `python -m main` dentro de `src/`."""

from __future__ import annotations

import sys

# The banners and step announcements use emoji; cp1252 consoles choke on them.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


if __name__ == "__main__":
    run()
