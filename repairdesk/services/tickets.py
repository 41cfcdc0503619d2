from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
from flask import abort
from sqlalchemy import func, or_, select
from repairdesk import get_db
from repairdesk.constants.statuses import STATUS_COMPLETED, STATUS_IN_PROGRESS
from repairdesk.models.ticket import Ticket, Part, WorkNote
from repairdesk.models.technician import Technician
from repairdesk.utils.listing import Page, apply_multi_sort, apply_pagination
from repairdesk.utils.timestamps import as_utc, utcnow

# Plain text columns a form may write; costs, dates and status are parsed by the caller
EDITABLE_FIELDS = (
    'priority', 'customer_name', 'customer_phone', 'customer_email',
    'device_type', 'device_brand', 'device_model', 'serial_number',
    'issue_description', 'internal_notes',
)

SORTABLE = {
    'id': Ticket.id,
    'status': Ticket.status,
    'priority': Ticket.priority,
    'customer_name': Ticket.customer_name,
    'due_date': Ticket.due_date,
    'updated_at': Ticket.updated_at,
}


@dataclass
class TicketStats:
    open_tickets: int = 0
    in_progress: int = 0
    overdue: int = 0
    completed_today: int = 0


def get_ticket_or_404(ticket_id: int) -> Ticket:
    t = get_db().execute(select(Ticket).where(Ticket.id==ticket_id)).scalar_one_or_none()
    if not t:
        abort(404, description='Ticket not found')
    return t


def _search_filter(term: str):
    like = f"%{term}%"
    clauses = [
        Ticket.customer_name.ilike(like),
        Ticket.customer_phone.ilike(like),
        Ticket.customer_email.ilike(like),
        Ticket.device_model.ilike(like),
        Ticket.device_brand.ilike(like),
        Ticket.serial_number.ilike(like),
        Ticket.issue_description.ilike(like),
    ]
    if term.isdigit():
        clauses.append(Ticket.id==int(term))
    return or_(*clauses)


def list_tickets(status: Optional[str] = None, search: Optional[str] = None, sort: Optional[str] = None) -> Page:
    q = get_db().query(Ticket)
    if status:
        q = q.filter(Ticket.status==status)
    if search:
        q = q.filter(_search_filter(search.strip()))
    q = apply_multi_sort(q, sort, SORTABLE, Ticket.id)
    return apply_pagination(q)


def search_tickets(term: Optional[str]) -> List[Ticket]:
    q = get_db().query(Ticket)
    if term and term.strip():
        q = q.filter(_search_filter(term.strip()))
    return q.order_by(Ticket.id.asc()).all()


def recent_tickets(limit: int = 10) -> List[Ticket]:
    return get_db().query(Ticket).order_by(Ticket.updated_at.desc(), Ticket.id.desc()).limit(limit).all()


def create_ticket(fields: Dict[str, Any], created_by: str, now: Optional[datetime] = None) -> Ticket:
    session = get_db()
    now = now or utcnow()
    t = Ticket(created_by=created_by, created_at=now, updated_at=now)
    _apply_fields(t, fields, now)
    session.add(t)
    session.commit()
    return t


def update_ticket(t: Ticket, fields: Dict[str, Any], now: Optional[datetime] = None) -> Ticket:
    now = now or utcnow()
    _apply_fields(t, fields, now)
    t.touch(now)
    get_db().commit()
    return t


def _apply_fields(t: Ticket, fields: Dict[str, Any], now: datetime):
    for key in EDITABLE_FIELDS:
        if key in fields and fields[key] is not None:
            setattr(t, key, fields[key])
    if fields.get('status'):
        t.change_status(fields['status'], now)
    if 'estimated_cost_cents' in fields:
        t.estimated_cost_cents = fields['estimated_cost_cents']
    if 'assigned_to' in fields:
        t.assigned_to = fields['assigned_to'] or None
    if 'due_date' in fields:
        t.due_date = fields['due_date']


def set_status(t: Ticket, status: str, now: Optional[datetime] = None) -> Ticket:
    # Unknown statuses are stored as given and rendered verbatim
    now = now or utcnow()
    t.change_status(status, now)
    t.touch(now)
    get_db().commit()
    return t


def add_part(t: Ticket, name: str, quantity: int, cost_cents: int, added_by: str, now: Optional[datetime] = None) -> Part:
    now = now or utcnow()
    part = Part(name=name, quantity=quantity, cost_cents=cost_cents, added_by=added_by, added_at=now)
    t.parts.append(part)
    t.touch(now)
    get_db().commit()
    return part


def delete_part(t: Ticket, part_id: int, now: Optional[datetime] = None) -> None:
    part = next((p for p in t.parts if p.id == part_id), None)
    if part is None:
        abort(404, description='Part not found')
    t.parts.remove(part)
    t.touch(now)
    get_db().commit()


def add_note(t: Ticket, content: str, author: str, now: Optional[datetime] = None) -> WorkNote:
    now = now or utcnow()
    note = WorkNote(content=content, author=author, timestamp=now)
    t.notes.append(note)
    t.touch(now)
    get_db().commit()
    return note


def count_open() -> int:
    return get_db().execute(select(func.count(Ticket.id)).where(Ticket.status!=STATUS_COMPLETED)).scalar_one()


def compute_stats(now: Optional[datetime] = None) -> TicketStats:
    session = get_db()
    now = as_utc(now or utcnow())
    stats = TicketStats(open_tickets=count_open())
    stats.in_progress = session.execute(
        select(func.count(Ticket.id)).where(Ticket.status==STATUS_IN_PROGRESS)).scalar_one()
    dated = session.execute(
        select(Ticket).where(Ticket.due_date.is_not(None), Ticket.status!=STATUS_COMPLETED)).scalars()
    stats.overdue = sum(1 for t in dated if t.is_overdue(now))
    completed = session.execute(
        select(Ticket.completed_at).where(Ticket.status==STATUS_COMPLETED, Ticket.completed_at.is_not(None))).scalars()
    stats.completed_today = sum(1 for ts in completed if as_utc(ts).date() == now.date())
    return stats


def list_technicians() -> List[Technician]:
    return get_db().execute(select(Technician).order_by(Technician.name.asc())).scalars().all()


def technician_workloads() -> Dict[str, int]:
    """Open ticket count per assignee name, counted from the tickets themselves."""
    rows = get_db().execute(
        select(Ticket.assigned_to, func.count(Ticket.id))
        .where(Ticket.assigned_to.is_not(None), Ticket.status!=STATUS_COMPLETED)
        .group_by(Ticket.assigned_to)
    ).all()
    return {name: count for name, count in rows}


def find_technician(name: str) -> Optional[Technician]:
    return get_db().execute(select(Technician).where(Technician.name==name)).scalar_one_or_none()


def technician_queue(name: str) -> List[Ticket]:
    """Open tickets for a technician; callers that are not technicians see every open ticket."""
    q = get_db().query(Ticket).filter(Ticket.status!=STATUS_COMPLETED)
    if find_technician(name) is not None:
        q = q.filter(Ticket.assigned_to==name)
    return q.order_by(Ticket.due_date.is_(None), Ticket.due_date.asc(), Ticket.id.asc()).all()
