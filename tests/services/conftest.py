# tests/services/conftest.py
from __future__ import annotations
import pytest
from starlette.testclient import TestClient

from filmcatalog.services.api.app import create_app
from filmcatalog.services.api.deps import get_mailer, transactional_session


@pytest.fixture()
def api_client(db, mail_outbox):
    """
    A TestClient whose FastAPI dependency `transactional_session` is overridden
    to yield the per-test Session. All API calls in one test share it
    (so POST -> GET works) and everything is rolled back at the end of the test.
    Mail goes to the in-memory outbox.
    """
    app = create_app(with_lifespan=False)

    def _override():
        # yield the same session for every request in this test
        yield db

    app.dependency_overrides[transactional_session] = _override
    app.dependency_overrides[get_mailer] = lambda: mail_outbox

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
