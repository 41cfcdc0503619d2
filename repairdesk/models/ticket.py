from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import declarative_base, relationship, Mapped, mapped_column
from sqlalchemy import Integer, String, Text, DateTime, ForeignKey
from repairdesk.constants.statuses import (
    STATUS_NEW, STATUS_COMPLETED, STATUS_LABELS, STATUS_CLASSES, DEFAULT_STATUS_CLASS,
    PRIORITY_NORMAL, PRIORITY_CLASSES, DEFAULT_PRIORITY_CLASS,
)
from repairdesk.utils.timestamps import utcnow, as_utc

Base = declarative_base()

CENT = Decimal('0.01')


def cents_to_decimal(cents: Optional[int]) -> Decimal:
    return (Decimal(cents or 0) / 100).quantize(CENT)


class Ticket(Base):
    """One repair job.

    Costs are held in integer cents. Everything derived from them (parts total,
    grand total) is computed from the current rows on access and never stored.
    """
    __tablename__ = 'tickets'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=STATUS_NEW, index=True)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default=PRIORITY_NORMAL)

    customer_name: Mapped[str] = mapped_column(String(120), nullable=False, default='')
    customer_phone: Mapped[str] = mapped_column(String(32), nullable=False, default='')
    customer_email: Mapped[str] = mapped_column(String(128), nullable=False, default='')

    device_type: Mapped[str] = mapped_column(String(80), nullable=False, default='')
    device_brand: Mapped[str] = mapped_column(String(80), nullable=False, default='')
    device_model: Mapped[str] = mapped_column(String(120), nullable=False, default='')
    serial_number: Mapped[str] = mapped_column(String(80), nullable=False, default='')

    issue_description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    internal_notes: Mapped[str] = mapped_column(Text, nullable=False, default='')
    estimated_cost_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    assigned_to: Mapped[Optional[str]] = mapped_column(String(120), nullable=True, index=True)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[str] = mapped_column(String(120), nullable=False, default='')

    parts: Mapped[List['Part']] = relationship('Part', back_populates='ticket', cascade='all, delete-orphan', order_by='Part.id')
    notes: Mapped[List['WorkNote']] = relationship('WorkNote', back_populates='ticket', cascade='all, delete-orphan', order_by='WorkNote.id')

    @property
    def status_display(self) -> str:
        status = self.status or ''
        return STATUS_LABELS.get(status, status)

    @property
    def status_class(self) -> str:
        return STATUS_CLASSES.get(self.status or '', DEFAULT_STATUS_CLASS)

    @property
    def priority_class(self) -> str:
        return PRIORITY_CLASSES.get(self.priority or '', DEFAULT_PRIORITY_CLASS)

    @property
    def estimated_cost(self) -> Decimal:
        return cents_to_decimal(self.estimated_cost_cents)

    @property
    def total_parts_cost_cents(self) -> int:
        return sum(p.line_total_cents for p in self.parts)

    @property
    def total_parts_cost(self) -> Decimal:
        return cents_to_decimal(self.total_parts_cost_cents)

    @property
    def total_cost_cents(self) -> int:
        return (self.estimated_cost_cents or 0) + self.total_parts_cost_cents

    @property
    def total_cost(self) -> Decimal:
        return cents_to_decimal(self.total_cost_cents)

    def is_overdue(self, now: datetime) -> bool:
        if self.due_date is None or self.status == STATUS_COMPLETED:
            return False
        return as_utc(now) > as_utc(self.due_date)

    def touch(self, now: Optional[datetime] = None):
        self.updated_at = now or utcnow()

    def change_status(self, status: str, now: Optional[datetime] = None):
        """Set the status, stamping ``completed_at`` only on the move into completed."""
        if status == STATUS_COMPLETED:
            if self.status != STATUS_COMPLETED:
                self.completed_at = now or utcnow()
        else:
            self.completed_at = None
        self.status = status


class Part(Base):
    __tablename__ = 'ticket_parts'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[int] = mapped_column(ForeignKey('tickets.id', ondelete='CASCADE'), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    cost_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    added_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    added_by: Mapped[str] = mapped_column(String(120), nullable=False, default='')

    ticket = relationship('Ticket', back_populates='parts')

    @property
    def cost(self) -> Decimal:
        return cents_to_decimal(self.cost_cents)

    @property
    def line_total_cents(self) -> int:
        return (self.quantity or 0) * (self.cost_cents or 0)

    @property
    def line_total(self) -> Decimal:
        return cents_to_decimal(self.line_total_cents)


class WorkNote(Base):
    __tablename__ = 'work_notes'
    # Append-only: no update path exists
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[int] = mapped_column(ForeignKey('tickets.id', ondelete='CASCADE'), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(String(120), nullable=False, default='')
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    ticket = relationship('Ticket', back_populates='notes')
