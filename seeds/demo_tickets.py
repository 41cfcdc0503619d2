"""Demo technicians and tickets for local development and tests.

Nothing under ``repairdesk`` imports this module; it is loaded by
``scripts/seed_demo.py`` and by the test suite.
"""
from __future__ import annotations
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import select
from repairdesk.models.ticket import Ticket, Part, WorkNote
from repairdesk.models.technician import Technician
from repairdesk.utils.timestamps import utcnow

TECHNICIANS = [
    {'id': 1, 'name': 'Mike Tech', 'email': 'mike@repairdesk.local', 'is_available': True},
    {'id': 2, 'name': 'Sarah Tech', 'email': 'sarah@repairdesk.local', 'is_available': True},
    {'id': 3, 'name': 'Bob Repair', 'email': 'bob@repairdesk.local', 'is_available': False},
]


def _tickets(now: datetime):
    return [
        Ticket(
            id=1001, status='new', priority='high',
            customer_name='John Doe', customer_phone='(555) 123-4567',
            device_type='Smartphone', device_model='iPhone 13 Pro',
            issue_description='Cracked screen, needs replacement',
            assigned_to='Mike Tech', due_date=now + timedelta(hours=48),
            created_at=now - timedelta(hours=3), updated_at=now - timedelta(hours=3), created_by='Front Desk',
        ),
        Ticket(
            id=1002, status='in_progress', priority='normal',
            customer_name='Jane Smith', customer_phone='(555) 987-6543',
            device_type='Laptop', device_model='MacBook Pro 2020',
            issue_description='Battery not charging',
            assigned_to='Sarah Tech',
            created_at=now - timedelta(hours=30), updated_at=now - timedelta(hours=2), created_by='Front Desk',
        ),
        Ticket(
            id=1003, status='in_progress', priority='high',
            customer_name='John Doe', customer_phone='(555) 123-4567', customer_email='john@example.com',
            device_type='Smartphone', device_brand='Apple', device_model='iPhone 13 Pro', serial_number='ABC123456789',
            issue_description='Screen is completely shattered after being dropped. Touch functionality still works but glass is unsafe.',
            estimated_cost_cents=15000,
            assigned_to='Mike Tech', due_date=now + timedelta(hours=48),
            created_at=now - timedelta(hours=24), updated_at=now, created_by='Front Desk',
            parts=[
                Part(name='iPhone 13 Pro Screen Assembly', quantity=1, cost_cents=8999, added_by='Mike Tech', added_at=now - timedelta(hours=3)),
                Part(name='Screen Adhesive', quantity=1, cost_cents=599, added_by='Mike Tech', added_at=now - timedelta(hours=3)),
            ],
            notes=[
                WorkNote(author='Mike Tech', content='Customer confirmed backup was done. Safe to proceed.', timestamp=now - timedelta(hours=2)),
            ],
        ),
    ]


def load_demo_data(session, now: Optional[datetime] = None) -> int:
    """Insert demo rows that are not already present. Returns number of rows added."""
    now = now or utcnow()
    added = 0
    existing_techs = {t.name for t in session.execute(select(Technician)).scalars()}
    for row in TECHNICIANS:
        if row['name'] not in existing_techs:
            session.add(Technician(**row))
            added += 1
    existing_ids = set(session.execute(select(Ticket.id)).scalars())
    for t in _tickets(now):
        if t.id not in existing_ids:
            session.add(t)
            added += 1
    session.flush()
    return added


def clear_demo_data(session):
    for t in session.execute(select(Ticket)).scalars().all():
        session.delete(t)
    for tech in session.execute(select(Technician)).scalars().all():
        session.delete(tech)
    session.flush()

__all__ = ['TECHNICIANS', 'load_demo_data', 'clear_demo_data']
