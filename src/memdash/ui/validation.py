from typing import List
from sqlmodel import Session, select
from memdash.db import engine, DATA_DIR
from memdash.models.memory import MemoryDoc
from memdash.logging import logger

def validate_schema() -> List[str]:
    """Validate that the store's table definition is registered."""
    errors = []
    if not hasattr(MemoryDoc, "__table__"):
        errors.append("Model MemoryDoc is missing table definition.")
    return errors

def validate_data_dir() -> List[str]:
    """Validate that the data directory exists and is writable."""
    errors = []

    if not DATA_DIR.exists():
        errors.append(f"Data directory missing: {DATA_DIR} (run `memdash db init`)")
        return errors

    try:
        test_file = DATA_DIR / ".write_test"
        test_file.touch()
        test_file.unlink()
    except OSError as e:
        errors.append(f"Cannot write to data directory {DATA_DIR}: {e}")

    return errors

def validate_db_connection() -> List[str]:
    """Validate database connection and basic query capability."""
    errors = []
    try:
        with Session(engine) as session:
            session.exec(select(MemoryDoc).limit(1)).first()
    except Exception as e:
        logger.error(f"Database check failed: {e}")
        errors.append(f"Database connection failed: {e}")

    return errors

def run_all_checks() -> List[str]:
    """Run all validation checks."""
    errors = []
    errors.extend(validate_schema())
    errors.extend(validate_data_dir())
    errors.extend(validate_db_connection())
    return errors
