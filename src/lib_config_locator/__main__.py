"""``python -m lib_config_locator`` runs the same CLI as the console script.

Examples
--------
``python -m lib_config_locator locate --organization Acme --application Demo --candidates``
"""

from __future__ import annotations

import sys

from .cli import main


if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main(sys.argv[1:]))
