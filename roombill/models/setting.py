"""Setting database model - flat key/value configuration store."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from roombill.core.database import Base


class Setting(Base):
    """A single configuration value, stored as text."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    setting_key: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    setting_value: Mapped[str] = mapped_column(String(255))
