import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from amaze import FACTORY_KEY, create_app, db  # noqa: E402


@pytest.fixture(scope="session")
def test_app(tmp_path_factory):
    db_path = tmp_path_factory.mktemp("db") / "amaze_test.db"
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path.as_posix()}",
            "AMAZE_PERSIST_DELIVERED": False,
        }
    )
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def factory(test_app):
    return test_app.extensions[FACTORY_KEY]


@pytest.fixture(autouse=True)
def _idle_factory(test_app):
    """Never leave a background order running into the next test."""
    yield
    f = test_app.extensions[FACTORY_KEY]
    if f.is_busy():
        f.cancel()
        f.wait_until_delivered(timeout=60)


def pytest_configure(config):  # register custom markers
    config.addinivalue_line("markers", "performance: generation time guardrails")
    config.addinivalue_line("markers", "db_isolation: force per-test DB rebuild for this test")


@pytest.fixture(autouse=True)
def _conditional_db_isolation(request, test_app):
    """Recreate DB only for tests marked with @pytest.mark.db_isolation."""
    if "db_isolation" in request.keywords:
        db.drop_all()
        db.create_all()
    yield
