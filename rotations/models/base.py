# rotations/models/base.py
from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utc_now():
    return datetime.now(timezone.utc)


def enum_values(enum_cls):
    """Persist enum *values* ("hands_on") rather than member names."""
    return [member.value for member in enum_cls]


# Largest value an INTEGER primary key can hold on SQLite and PostgreSQL BIGINT
MAX_ID = 2 ** 63 - 1
