from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Match PostgreSQL's own constraint names so the schema initializer can drop them by name
NAMING_CONVENTION = {
    "pk": "%(table_name)s_pkey",
    "fk": "%(table_name)s_%(column_0_name)s_fkey",
    "uq": "%(table_name)s_%(column_0_N_name)s_key",
    "ix": "idx_%(table_name)s_%(column_0_N_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

# Import models so the metadata is fully populated
from app.models import *  # noqa
