from repairdesk import get_db
from repairdesk.models.ticket import Ticket
from repairdesk.models.technician import Technician
from seeds.demo_tickets import load_demo_data, clear_demo_data, TECHNICIANS


def test_load_demo_data_is_idempotent(app_instance):
    session = get_db()
    assert load_demo_data(session) == len(TECHNICIANS) + 3
    session.commit()
    assert load_demo_data(session) == 0
    t = session.get(Ticket, 1003)
    assert len(t.parts) == 2 and len(t.notes) == 1
    assert str(t.total_cost) == '245.98'


def test_clear_demo_data(app_instance, demo_data):
    session = get_db()
    clear_demo_data(session)
    session.commit()
    assert session.query(Ticket).count() == 0
    assert session.query(Technician).count() == 0


def test_seed_script_dry_run(monkeypatch, capsys):
    from scripts.seed_demo import main
    monkeypatch.setenv('DATABASE_URL', 'sqlite+pysqlite:///:memory:')
    assert main(['--dry-run']) == 0
    out = capsys.readouterr().out
    assert '[DRY-RUN] Would add 6 row(s)' in out
