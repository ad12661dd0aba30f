import os

import pytest
from notifications.channel.fake_email import FakeEmailAdapter
from ordering.config import Settings
from ordering.order.codes import reset_code_generator
from ordering.order.lifecycle import OrderLifecycle
from ordering.proof.memory_adapter import InMemoryProofStore

ADMIN_TOKEN = "test-admin-token"


@pytest.fixture(scope="session")
def _ordering_domain(request):
    """Initialize the ordering domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from ordering.domain import ordering

    ordering.init()
    return ordering


@pytest.fixture(scope="session", autouse=True)
def setup_db(_ordering_domain):
    from ordering.utils.db import drop_db, setup_db

    setup_db(_ordering_domain)

    yield

    drop_db(_ordering_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_ordering_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _ordering_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()

    reset_code_generator()


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    return Settings(
        environment="test",
        store_name="Test Store",
        admin_token=ADMIN_TOKEN,
        support_email="help@teststore.example",
    )


@pytest.fixture()
def email():
    return FakeEmailAdapter()


@pytest.fixture()
def proof_store():
    return InMemoryProofStore()


@pytest.fixture()
def lifecycle(settings, email, proof_store):
    return OrderLifecycle(settings, email, proof_store)


# ---------------------------------------------------------------------------
# Submissions
# ---------------------------------------------------------------------------
def _submission_payload(**overrides):
    """A valid storefront checkout payload, in the camelCase the storefront sends."""
    payload = {
        "email": "ada@example.com",
        "name": "Ada Lovelace",
        "phone": "555-0100",
        "shipLine1": "12 Analytical Way",
        "shipCity": "Springfield",
        "shipState": "IL",
        "shipPostal": "62701",
        "shipCountry": "US",
        "items": [
            {"name": "Logo Tee", "size": "M", "price": 12.49, "qty": 2},
        ],
        "paymentMethod": "Cash App",
        "total": 24.98,
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def make_submission():
    return _submission_payload


@pytest.fixture()
def submission():
    return _submission_payload()


@pytest.fixture()
def placed_order(lifecycle, submission):
    return lifecycle.place_order(submission)


@pytest.fixture()
def paid_order(lifecycle, placed_order):
    lifecycle.mark_paid({"id": placed_order.order_id})
    return placed_order
