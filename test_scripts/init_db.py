# initiative_prioritizer/test_scripts/init_db.py

"""
Initialize database schema by creating all tables defined by SQLAlchemy models.
Local bootstrap only; deployed databases are migrated with Alembic.
"""

from prioritizer.db.base import Base
from prioritizer.db.session import engine

# Import models here so SQLAlchemy registers them

import prioritizer.db.models.initiative  # noqa: F401
import prioritizer.db.models.scoring  # noqa: F401
import prioritizer.db.models.intake_session  # noqa: F401


def main() -> None:
    print("Creating all tables using SQLAlchemy metadata...")
    Base.metadata.create_all(bind=engine)
    print("Done.")


if __name__ == "__main__":
    main()
