"""
Build the SQLite statute database (FTS5 index included) from JSON seed files.
Defaults to data/seed and writes data/database.db, but supports CLI flags to
customize both paths.
"""
import os
import sys
import argparse
import logging

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from fr_law.errors import SeedValidationError
from fr_law.ingest.build_db import build_database

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("build_db")

SEED_DIR = os.getenv("SEED_DIR", os.path.join(PROJECT_ROOT, "data", "seed"))
OUT_PATH = os.getenv("FR_LAW_DB_PATH", os.path.join(PROJECT_ROOT, "data", "database.db"))

def main():
    parser = argparse.ArgumentParser(description="Build the French statute database")
    parser.add_argument("--seed-dir", type=str, default=SEED_DIR, help="Directory containing seed JSON files")
    parser.add_argument("--out", type=str, default=OUT_PATH, help="Output path for the SQLite database")
    args = parser.parse_args()

    try:
        logger.info(f"Building database from {args.seed_dir}...")
        summary = build_database(args.seed_dir, args.out)
        size_kb = os.path.getsize(summary.db_path) / 1024
        logger.info(f"Database saved to {summary.db_path} ({size_kb:.1f} KB)")
    except SeedValidationError as e:
        logger.error(str(e))
        sys.exit(2)
    except Exception as e:
        logger.error(f"Failed to build database: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
