"""
Create the brokerage schema in PostgreSQL.

Executes db/schema.sql against the database configured in the
application settings (DATABASE_URL or POSTGRES_*). Idempotent.

Usage:
    python db/init_schema.py
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.config import settings  # noqa: E402
from app.infrastructure.brokerage.database import apply_schema, create_db_engine  # noqa: E402
from app.shared.logging import configure_logging  # noqa: E402


def main() -> int:
    configure_logging(settings.log_level)
    engine = create_db_engine(settings.get_database_dsn())
    try:
        apply_schema(engine)
    except Exception:
        logging.getLogger(__name__).exception("Schema creation failed")
        return 1
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
