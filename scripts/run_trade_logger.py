"""
Run the trade-history logger over saved page snapshots from CLI.
"""

from __future__ import annotations

from trade_logger.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
