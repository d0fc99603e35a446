# initiative_prioritizer/prioritizer/db/base.py

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# IMPORTANT: import all model modules so they register with Base.metadata
# and their string-based relationships (like "InitiativeScore") can be resolved.

from prioritizer.db import models  # noqa: F401,E402  (imported for the side-effects)
