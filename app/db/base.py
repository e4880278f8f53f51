# app/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models in the availability service.

    Models register themselves on import; app.db.session imports all of
    them so Base.metadata is complete before tables are created.
    """
    pass
