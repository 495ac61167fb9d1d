"""ORM models — imported here so Base.metadata sees every table."""

from app.models.instrument import Instrument
from app.models.singer import Singer

__all__ = ["Instrument", "Singer"]
