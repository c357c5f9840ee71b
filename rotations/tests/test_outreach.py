import pytest

from rotations.core.errors import NotFound, PermissionDenied
from rotations.models import ContactStatus, NewsletterSubscription
from rotations.schemas.outreach import ContactQueryCreate, ContactResponse
from rotations.services import outreach


# Newsletter

def test_subscribe_is_idempotent_and_case_insensitive(test_db):
    first = outreach.subscribe(test_db, "Student@Example.com")
    second = outreach.subscribe(test_db, "student@example.com")

    assert first.id == second.id
    assert first.email == "student@example.com"
    assert test_db.query(NewsletterSubscription).count() == 1


def test_unsubscribe_then_resubscribe(test_db):
    outreach.subscribe(test_db, "student@example.com")

    outreach.unsubscribe(test_db, "student@example.com")
    row = test_db.query(NewsletterSubscription).one()
    assert row.is_active is False
    assert row.unsubscribed_at is not None

    again = outreach.subscribe(test_db, "student@example.com")
    assert again.is_active is True
    assert again.unsubscribed_at is None


def test_unsubscribe_unknown_address_is_noop(test_db):
    outreach.unsubscribe(test_db, "nobody@example.com")

    assert test_db.query(NewsletterSubscription).count() == 0


# Contact queries

def _query(**overrides):
    fields = dict(
        name="Priya Nair",
        email="priya@example.com",
        subject="Visa letters",
        message="Do you provide invitation letters for visas?",
    )
    fields.update(overrides)
    return ContactQueryCreate(**fields)


def test_contact_query_starts_new(test_db):
    query = outreach.create_contact_query(test_db, _query())

    assert query.status == ContactStatus.NEW
    assert query.responded_at is None


def test_admin_lists_and_answers(test_db, admin):
    first = outreach.create_contact_query(test_db, _query())
    outreach.create_contact_query(test_db, _query(subject="Fees"))

    answered = outreach.respond_to_contact_query(
        test_db, admin, first.id,
        ContactResponse(status="resolved", response="Yes, once you are accepted."),
    )

    assert answered.status == ContactStatus.RESOLVED
    assert answered.responded_by == admin.id
    assert answered.responded_at is not None
    assert len(outreach.list_contact_queries(test_db, admin)) == 2
    assert [q.id for q in outreach.list_contact_queries(test_db, admin, status=ContactStatus.RESOLVED)] == [first.id]


def test_status_only_update_leaves_response_empty(test_db, admin):
    query = outreach.create_contact_query(test_db, _query())

    updated = outreach.respond_to_contact_query(test_db, admin, query.id, ContactResponse(status="in_progress"))

    assert updated.status == ContactStatus.IN_PROGRESS
    assert updated.response is None
    assert updated.responded_by is None


def test_contact_queries_are_admin_only(test_db, learner, admin):
    query = outreach.create_contact_query(test_db, _query())

    with pytest.raises(PermissionDenied):
        outreach.list_contact_queries(test_db, learner)
    with pytest.raises(PermissionDenied):
        outreach.respond_to_contact_query(test_db, learner, query.id, ContactResponse(status="resolved"))
    with pytest.raises(NotFound):
        outreach.respond_to_contact_query(test_db, admin, query.id + 1000, ContactResponse(status="resolved"))
