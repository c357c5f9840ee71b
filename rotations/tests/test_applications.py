import pytest

from rotations.core.errors import (
    DuplicateApplication,
    IllegalTransition,
    InvariantViolation,
    NotFound,
    PermissionDenied,
)
from rotations.models import Application, ApplicationStatus, Program
from rotations.schemas.application import STATUS_DISPLAY, status_display
from rotations.schemas.auth import Actor, ActorRole
from rotations.services import applications, availability

PENDING = ApplicationStatus.PENDING
ACCEPTED = ApplicationStatus.ACCEPTED
REJECTED = ApplicationStatus.REJECTED
WAITLISTED = ApplicationStatus.WAITLISTED


@pytest.mark.parametrize(
    "current, target, allowed",
    [
        (PENDING, ACCEPTED, True),
        (PENDING, REJECTED, True),
        (PENDING, WAITLISTED, True),
        (PENDING, PENDING, False),
        (WAITLISTED, ACCEPTED, True),
        (WAITLISTED, REJECTED, True),
        (WAITLISTED, PENDING, False),
        (ACCEPTED, REJECTED, False),
        (ACCEPTED, PENDING, False),
        (REJECTED, ACCEPTED, False),
        (REJECTED, PENDING, False),
    ],
)
def test_transition_table(current, target, allowed):
    assert applications.can_transition(current, target) is allowed


def test_reject_pending_returns_seat(test_db, make_program, admin, learner, other_learner):
    program = make_program(total_seats=3)
    first = availability.claim_seat(test_db, program.id, learner.id)
    availability.claim_seat(test_db, program.id, other_learner.id)
    test_db.refresh(program)
    assert program.available_seats == 1

    rejected = applications.transition_application(test_db, first.id, REJECTED, admin, review_notes="Full cohort")

    assert rejected.status == REJECTED
    assert rejected.review_notes == "Full cohort"
    assert rejected.reviewed_by == admin.id
    test_db.refresh(program)
    assert program.available_seats == 2


def test_rejected_is_terminal(test_db, make_program, admin, learner):
    program = make_program(total_seats=3)
    application = availability.claim_seat(test_db, program.id, learner.id)
    applications.transition_application(test_db, application.id, REJECTED, admin)

    with pytest.raises(IllegalTransition):
        applications.transition_application(test_db, application.id, ACCEPTED, admin)

    test_db.refresh(program)
    assert program.available_seats == 3


def test_second_rejection_does_not_release_twice(test_db, make_program, admin, learner):
    program = make_program(total_seats=3)
    application = availability.claim_seat(test_db, program.id, learner.id)
    applications.transition_application(test_db, application.id, REJECTED, admin)

    with pytest.raises(IllegalTransition):
        applications.transition_application(test_db, application.id, REJECTED, admin)

    test_db.refresh(program)
    assert program.available_seats == 3


def test_waitlist_keeps_seat_and_acceptance_does_not_take_another(test_db, make_program, admin, learner):
    program = make_program(total_seats=2)
    application = availability.claim_seat(test_db, program.id, learner.id)

    applications.transition_application(test_db, application.id, WAITLISTED, admin)
    test_db.refresh(program)
    assert program.available_seats == 1

    accepted = applications.transition_application(test_db, application.id, ACCEPTED, admin)
    assert accepted.status == ACCEPTED
    test_db.refresh(program)
    assert program.available_seats == 1


def test_reject_waitlisted_returns_seat(test_db, make_program, admin, learner):
    program = make_program(total_seats=2)
    application = availability.claim_seat(test_db, program.id, learner.id)
    applications.transition_application(test_db, application.id, WAITLISTED, admin)

    applications.transition_application(test_db, application.id, REJECTED, admin)

    test_db.refresh(program)
    assert program.available_seats == 2


def test_accepted_cannot_be_rejected(test_db, make_program, admin, learner):
    program = make_program(total_seats=2)
    application = availability.claim_seat(test_db, program.id, learner.id)
    applications.transition_application(test_db, application.id, ACCEPTED, admin)

    with pytest.raises(IllegalTransition):
        applications.transition_application(test_db, application.id, REJECTED, admin)

    test_db.refresh(program)
    assert program.available_seats == 1


def test_release_above_capacity_rolls_back_status(test_db, make_program, admin, learner):
    program = make_program(total_seats=2)
    application = availability.claim_seat(test_db, program.id, learner.id)
    # Corrupt the counter so the release has nowhere to go
    test_db.query(Program).filter(Program.id == program.id).update(
        {Program.available_seats: Program.total_seats}, synchronize_session=False
    )
    test_db.commit()

    with pytest.raises(InvariantViolation):
        applications.transition_application(test_db, application.id, REJECTED, admin)

    test_db.expire_all()
    assert test_db.get(Application, application.id).status == PENDING
    assert test_db.get(Program, program.id).available_seats == 2


def test_reapply_after_rejection_is_allowed(test_db, make_program, admin, learner):
    program = make_program(total_seats=2)
    first = availability.claim_seat(test_db, program.id, learner.id)
    applications.transition_application(test_db, first.id, REJECTED, admin)

    second = availability.claim_seat(test_db, program.id, learner.id)

    assert second.id != first.id
    assert second.status == PENDING
    test_db.refresh(program)
    assert program.available_seats == 1


def test_reapply_after_acceptance_is_refused(test_db, make_program, admin, learner):
    program = make_program(total_seats=3)
    first = availability.claim_seat(test_db, program.id, learner.id)
    applications.transition_application(test_db, first.id, ACCEPTED, admin)

    with pytest.raises(DuplicateApplication):
        availability.claim_seat(test_db, program.id, learner.id)

    test_db.refresh(program)
    assert program.available_seats == 2


def test_reapply_while_waitlisted_is_refused(test_db, make_program, admin, learner):
    program = make_program(total_seats=3)
    first = availability.claim_seat(test_db, program.id, learner.id)
    applications.transition_application(test_db, first.id, WAITLISTED, admin)

    with pytest.raises(DuplicateApplication):
        availability.claim_seat(test_db, program.id, learner.id)


def test_unknown_application(test_db, admin):
    with pytest.raises(NotFound):
        applications.transition_application(test_db, 424242, ACCEPTED, admin)


# Permissions

def test_learner_cannot_review_own_application(test_db, make_program, learner):
    program = make_program()
    application = availability.claim_seat(test_db, program.id, learner.id)

    with pytest.raises(PermissionDenied):
        applications.transition_application(test_db, application.id, ACCEPTED, learner)

    test_db.expire_all()
    assert test_db.get(Application, application.id).status == PENDING


def test_preceptor_reviews_only_their_programs(test_db, make_program, preceptor, learner):
    own = make_program(preceptor_id=preceptor.id)
    foreign = make_program(preceptor_id="preceptor-9")
    own_application = availability.claim_seat(test_db, own.id, learner.id)
    foreign_application = availability.claim_seat(test_db, foreign.id, learner.id)

    accepted = applications.transition_application(test_db, own_application.id, ACCEPTED, preceptor)
    assert accepted.status == ACCEPTED

    with pytest.raises(PermissionDenied):
        applications.transition_application(test_db, foreign_application.id, ACCEPTED, preceptor)


def test_get_application_visible_to_owner_and_reviewer_only(
    test_db, make_program, admin, learner, other_learner, preceptor
):
    program = make_program(preceptor_id=preceptor.id)
    application = availability.claim_seat(test_db, program.id, learner.id)

    assert applications.get_application(test_db, application.id, learner).id == application.id
    assert applications.get_application(test_db, application.id, preceptor).id == application.id
    assert applications.get_application(test_db, application.id, admin).id == application.id
    with pytest.raises(PermissionDenied):
        applications.get_application(test_db, application.id, other_learner)


def test_list_applications_scoped_by_role(test_db, make_program, admin, learner, other_learner, preceptor):
    own = make_program(preceptor_id=preceptor.id)
    foreign = make_program()
    availability.claim_seat(test_db, own.id, learner.id)
    availability.claim_seat(test_db, own.id, other_learner.id)
    availability.claim_seat(test_db, foreign.id, learner.id)

    assert len(applications.list_applications(test_db, admin)) == 3
    assert len(applications.list_applications(test_db, admin, applicant_id=learner.id)) == 2
    assert {a.program_id for a in applications.list_applications(test_db, preceptor)} == {own.id}
    with pytest.raises(PermissionDenied):
        applications.list_applications(test_db, learner)


def test_list_applications_status_filter(test_db, make_program, admin, learner, other_learner):
    program = make_program()
    first = availability.claim_seat(test_db, program.id, learner.id)
    availability.claim_seat(test_db, program.id, other_learner.id)
    applications.transition_application(test_db, first.id, WAITLISTED, admin)

    waitlisted = applications.list_applications(test_db, admin, status=WAITLISTED)

    assert [a.id for a in waitlisted] == [first.id]


def test_list_my_applications(test_db, make_program, learner, other_learner):
    first = make_program()
    second = make_program()
    availability.claim_seat(test_db, first.id, learner.id)
    availability.claim_seat(test_db, second.id, learner.id)
    availability.claim_seat(test_db, first.id, other_learner.id)

    mine = applications.list_my_applications(test_db, learner)

    assert len(mine) == 2
    assert all(a.applicant_id == learner.id for a in mine)


# Display projection

def test_status_display_covers_every_status():
    assert set(STATUS_DISPLAY) == set(ApplicationStatus)
    assert status_display("pending") == {"label": "Under review", "color": "yellow"}
    assert status_display(REJECTED)["color"] == "red"


def test_status_display_is_a_copy():
    display = status_display(ACCEPTED)
    display["label"] = "changed"

    assert STATUS_DISPLAY[ACCEPTED]["label"] == "Accepted"


def test_admin_actor_flag():
    assert Actor(id="x", role=ActorRole.admin).is_admin
    assert not Actor(id="x", role=ActorRole.preceptor).is_admin
