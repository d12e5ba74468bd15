# どこで: `src/tilecalc/__main__.py`。
# 何を: `python -m tilecalc` のエントリポイント。

from __future__ import annotations

import sys

from tilecalc.cli import main

if __name__ == "__main__":
    sys.exit(main())
