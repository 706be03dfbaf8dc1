# models/base.py
import re

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, declared_attr


# Stable constraint names so Alembic revisions match what create_all() builds
NAMING_CONVENTION = {
     "ix": "ix_%(column_0_label)s",
     "uq": "uq_%(table_name)s_%(column_0_name)s",
     "ck": "ck_%(table_name)s_%(constraint_name)s",
     "fk": "fk_%(table_name)s_%(column_0_name)s",
     "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Provides the shared metadata and the default table naming rule.
     """
     metadata = MetaData(naming_convention=NAMING_CONVENTION)

     @declared_attr.directive
     def __tablename__(cls) -> str:
          """
          Automatically generate table name from class name.
          Example: InvoiceSequence -> invoice_sequences
          """
          name = re.sub(r'(?<!^)(?=[A-Z])', '_', cls.__name__).lower()
          if name.endswith('y'):
               return name[:-1] + 'ies'
          elif name.endswith('s'):
               return name + 'es'
          return name + 's'


def enum_values(enum_cls):
     """Persist enum *values* (e.g. 'Fully Booked') rather than member names."""
     return [member.value for member in enum_cls]
