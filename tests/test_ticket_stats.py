from datetime import timedelta
from repairdesk.services.tickets import add_note, compute_stats, count_open, set_status, technician_queue
from repairdesk.utils.timestamps import utcnow
from tests.test_utils_seed import create_ticket, ensure_technician


def test_stats_on_demo_data(app_instance, demo_data):
    stats = compute_stats()
    assert stats.open_tickets == 3
    assert stats.in_progress == 2
    assert stats.overdue == 0
    assert stats.completed_today == 0


def test_stats_overdue_and_completed_today(app_instance):
    now = utcnow()
    create_ticket(status='in_progress', due_date=now - timedelta(hours=2))
    create_ticket(status='waiting_parts', due_date=now - timedelta(minutes=5))
    create_ticket(status='new', due_date=now + timedelta(days=1))
    create_ticket(status='completed', due_date=now - timedelta(days=3), completed_at=now)
    create_ticket(status='completed', completed_at=now - timedelta(days=2), updated_at=now)
    stats = compute_stats(now)
    assert stats.open_tickets == 3
    assert stats.in_progress == 1
    assert stats.overdue == 2
    assert stats.completed_today == 1
    assert count_open() == 3


def test_queue_orders_by_due_date_with_undated_last(app_instance):
    ensure_technician('Mike Tech')
    now = utcnow()
    late = create_ticket(status='new', assigned_to='Mike Tech', due_date=now + timedelta(days=5))
    undated = create_ticket(status='new', assigned_to='Mike Tech')
    soon = create_ticket(status='ready', assigned_to='Mike Tech', due_date=now + timedelta(hours=1))
    create_ticket(status='new', assigned_to='Sarah Tech')
    assert [t.id for t in technician_queue('Mike Tech')] == [soon.id, late.id, undated.id]
    # non-technicians see every open ticket
    assert len(technician_queue('Front Desk')) == 4


def test_completed_today_ignores_later_edits(app_instance):
    now = utcnow()
    last_week = create_ticket(status='in_progress')
    set_status(last_week, 'completed', now=now - timedelta(days=7))
    add_note(last_week, 'Customer picked up', author='Front Desk', now=now)
    assert compute_stats(now).completed_today == 0

    today = create_ticket(status='ready')
    set_status(today, 'completed', now=now)
    assert compute_stats(now).completed_today == 1
