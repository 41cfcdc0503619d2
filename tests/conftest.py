import os, sys, pytest
# Ensure project root is on path so 'repairdesk', 'seeds' and 'scripts' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from repairdesk import create_app, get_db
from seeds.demo_tickets import load_demo_data

TEST_CONFIG = {
    'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
    'JWT_SECRET_KEY': 'test-secret-key-with-enough-length-32b',
    'DEFAULT_USER_NAME': 'Front Desk',
    'TICKET_PAGE_SIZE': 25,
}


@pytest.fixture()
def app_instance():
    # Fresh in-memory database per test; StaticPool keeps it alive across sessions
    app = create_app(dict(TEST_CONFIG))
    with app.app_context():
        yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def demo_data(app_instance):
    session = get_db()
    load_demo_data(session)
    session.commit()
    return session
