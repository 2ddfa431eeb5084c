"""
Batch job: recompute red zones from the full accident log.
Run from the project root: python scripts/calculate_red_zones.py
Exits with status 1 if accidents cannot be read or red zones cannot be stored.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

from database import engine, Base, SessionLocal
from errors import RedZoneError
from services.red_zones import update_red_zones

logger = logging.getLogger("calculate_red_zones")


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        summary = update_red_zones(db)
    except RedZoneError as e:
        logger.error("Red zone update aborted: %s", e)
        return 1
    finally:
        db.close()

    logger.info(
        "Stored %d red zones from %d accidents (%d clusters)",
        summary.red_zone_count, summary.accident_count, summary.cluster_count,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
