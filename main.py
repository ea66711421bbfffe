"""Entry point de desarrollo (sin instalar el paquete).

Permite ejecutar la CLI desde un checkout con:
- `python main.py setup`
- `python main.py sync --root ../mi-proyecto`

El código vive en `src/`, así que sin `pip install -e .` hay que añadirlo a
`sys.path` antes de importar `cli`.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
