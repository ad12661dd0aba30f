"""Shared BDD fixtures and step definitions for the order lifecycle."""

import pytest
from ordering.errors import InvalidTransitionError
from ordering.order.lifecycle import OrderLifecycle
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def outcome():
    """Container for the latest transition result or rejection."""
    return {"result": None, "error": None}


@pytest.fixture()
def current_lifecycle(lifecycle):
    return {"service": lifecycle}


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("proof uploads mark orders paid")
def _(current_lifecycle, settings, email, proof_store):
    current_lifecycle["service"] = OrderLifecycle(
        settings.with_overrides(proof_marks_paid=True),
        email,
        proof_store,
    )


@given("a pending order", target_fixture="order_id")
def _(current_lifecycle, submission, email):
    result = current_lifecycle["service"].place_order(submission)
    email.reset()
    return result.order_id


@given("a paid order", target_fixture="order_id")
def _(current_lifecycle, submission, email):
    service = current_lifecycle["service"]
    result = service.place_order(submission)
    service.mark_paid({"id": result.order_id})
    email.reset()
    return result.order_id


@given("the email service is down")
def _(email):
    email.configure(should_succeed=False, failure_reason="Email service unavailable")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse('the order is "{status}"'))
def _(order_id, status):
    assert _order(order_id).status == status


@then(parsers.parse("the order total is {total:f}"))
def _(order_id, total):
    assert _order(order_id).total == pytest.approx(total)


@then("the customer was emailed payment instructions")
def _(email, outcome):
    instructions = outcome["result"].data["payment_instructions"]
    assert instructions.strip()
    assert instructions in email.sent_emails[0]["body"]


@then("no email was sent after placement")
def _(email):
    assert email.attempts == []


@then("the last transition reported no state change")
def _(outcome):
    assert outcome["result"].state_changed is False


@then("the order has a payment proof")
def _(order_id):
    assert _order(order_id).payment_proof


@then(parsers.parse('the order tracking number is "{number}"'))
def _(order_id, number):
    assert _order(order_id).tracking_number == number


@then(parsers.parse("{count:d} shipping emails were attempted"))
def _(email, count):
    assert len(email.attempts) == count


@then("the last notification failed")
def _(outcome):
    assert outcome["result"].notifications[-1].status == "failed"


@then("the transition is rejected")
def _(outcome):
    assert isinstance(outcome["error"], InvalidTransitionError)
