"""
Delete sessions whose expiry has passed.

Expired sessions are normally removed when a client presents them again;
this sweeps the ones nobody comes back for. Safe to run from cron:

  cd backend && python scripts/purge_expired_sessions.py
"""

import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from newsroom.core.database import SessionLocal
from newsroom.services.session_service import session_service


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    db = SessionLocal()
    try:
        deleted = session_service.purge_expired_sessions(db)
    finally:
        db.close()
    print(f"Removed {deleted} expired session(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
