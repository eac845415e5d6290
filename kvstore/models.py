from sqlalchemy import Column, String

from .db import Base

TABLE_NAME = "KeyValueDataStore"


class KeyValueRow(Base):
    __tablename__ = TABLE_NAME

    # Column names match the table layout shared with other readers of the
    # same database: KEY, VALUE, TYPE.
    key = Column("KEY", String, primary_key=True)
    value = Column("VALUE", String, nullable=False)
    type = Column("TYPE", String, nullable=False)
