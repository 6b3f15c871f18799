"""Reset (or list) the numbering counters.

    python scripts/reset_counters.py                 # list counters
    python scripts/reset_counters.py stt:global      # reset one key
    python scripts/reset_counters.py stt:global 17641  # set the last issued number
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.cargo_system.cargo_system.container import build_container


def main() -> None:
    parser = argparse.ArgumentParser(description="Kelola counter nomor STT / invoice")
    parser.add_argument("key", nargs="?", help="counter key, mis. stt:global atau stt:branch:bandung")
    parser.add_argument("value", nargs="?", type=int, help="nomor terakhir yang dianggap sudah terbit")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    counters = build_container(db_config=settings.DB_CONFIG).counter_service

    if not args.key:
        for state in counters.list_counters():
            print(f"{state.counter_key:<28} {state.prefix:<8} {state.current_number}")
        return

    if args.value is None:
        existed = counters.reset(args.key)
        print(f"OK: Counter {args.key} direset (ada sebelumnya: {'ya' if existed else 'tidak'})")
    else:
        counters.set_current(args.key, args.value)
        print(f"OK: Counter {args.key} = {args.value}")


if __name__ == "__main__":
    main()
