from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Boolean
from repairdesk.models.ticket import Base


class Technician(Base):
    __tablename__ = 'technicians'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(128), nullable=False, default='')
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

# Reference data only; rows come from seeding, no route mutates them.
