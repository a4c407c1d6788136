"""SQLAlchemy Declarative Base — shared by every CreditMart model.

Invariants:
    - All models inherit from Base; Base.metadata is what Alembic diffs against
    - Constraint names are deterministic (naming convention), so migrations can
      drop and alter them by name on any backend
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
