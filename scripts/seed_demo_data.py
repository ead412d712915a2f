"""Load data/seed.json brands and claims into SQLite for local development.

Run from project root:
    python scripts/seed_demo_data.py [path/to/data.json]

Uses WARRANTY_DB_PATH (default data/warranty.db).
Re-running the script does not duplicate brands or claims.
"""

import json
import sys
from pathlib import Path

from warranty_claims.config.settings import get_db_path
from warranty_claims.db.seed import seed_from_file

# Project root (parent of scripts/)
_ROOT = Path(__file__).resolve().parent.parent


def main() -> None:
    data_path = Path(sys.argv[1]) if len(sys.argv) > 1 else _ROOT / "data" / "seed.json"
    if not data_path.exists():
        print(f"Seed data not found: {data_path}")
        return
    counts = seed_from_file(data_path)
    print(f"Seeded into {get_db_path()}: {json.dumps(counts)}")


if __name__ == "__main__":
    main()
