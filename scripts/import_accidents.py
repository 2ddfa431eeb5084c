"""
Import an accident CSV dataset into the accidents table.
Run from the project root: python scripts/import_accidents.py [path/to/accidents.csv]
Defaults to ACCIDENTS_CSV_PATH. Already imported records are skipped.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

from sqlalchemy.exc import SQLAlchemyError

from config import ACCIDENTS_CSV_PATH
from database import engine, Base, SessionLocal
from errors import DatasetNotFoundError
from services.importer import import_accidents_csv

logger = logging.getLogger("import_accidents")


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    argv = sys.argv[1:] if argv is None else argv
    csv_path = argv[0] if argv else ACCIDENTS_CSV_PATH

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        summary = import_accidents_csv(db, csv_path)
    except DatasetNotFoundError as e:
        logger.error("%s", e)
        return 1
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Import stopped, batch upload failed: %s", e)
        return 1
    finally:
        db.close()

    logger.info(
        "Import complete: %d imported, %d duplicates, %d skipped of %d rows",
        summary.imported, summary.duplicates, summary.skipped, summary.total_rows,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
