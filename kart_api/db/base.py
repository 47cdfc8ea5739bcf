"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from kart_api.models import catalog as _catalog  # noqa: E402,F401
from kart_api.models import order as _order  # noqa: E402,F401
from kart_api.models import pending_login as _pending_login  # noqa: E402,F401
