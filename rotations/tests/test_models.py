from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from rotations.models import Application, ApplicationStatus, Favorite, Program, ProgramType, Review


def _program(**overrides):
    fields = dict(
        title="Raw program",
        type=ProgramType.CLERKSHIP,
        hospital_name="General Hospital",
        mentor_name="Dr. Who",
        location="Austin, USA",
        country="USA",
        city="Austin",
        description="Inserted directly",
        duration_weeks=2,
        start_date=date(2030, 5, 1),
        total_seats=3,
        available_seats=3,
    )
    fields.update(overrides)
    return Program(**fields)


def test_available_cannot_exceed_total(test_db):
    test_db.add(_program(total_seats=2, available_seats=3))

    with pytest.raises(IntegrityError):
        test_db.commit()
    test_db.rollback()


def test_available_cannot_go_negative(test_db):
    test_db.add(_program(available_seats=-1))

    with pytest.raises(IntegrityError):
        test_db.commit()
    test_db.rollback()


def test_program_type_stored_by_value(test_db):
    program = _program(type=ProgramType.HANDS_ON)
    test_db.add(program)
    test_db.commit()

    test_db.expire_all()
    assert test_db.get(Program, program.id).type == ProgramType.HANDS_ON
    assert program.is_free
    assert program.held_seats == 0


def test_favorite_pair_is_unique(test_db):
    program = _program()
    test_db.add(program)
    test_db.commit()

    test_db.add(Favorite(applicant_id="learner-1", program_id=program.id))
    test_db.commit()
    test_db.add(Favorite(applicant_id="learner-1", program_id=program.id))
    with pytest.raises(IntegrityError):
        test_db.commit()
    test_db.rollback()


def test_review_rating_check(test_db):
    program = _program()
    test_db.add(program)
    test_db.commit()

    test_db.add(Review(author_id="learner-1", program_id=program.id, rating=9, comment="Out of range rating"))
    with pytest.raises(IntegrityError):
        test_db.commit()
    test_db.rollback()


def test_one_open_application_per_applicant_and_program(test_db):
    program = _program()
    test_db.add(program)
    test_db.commit()

    test_db.add(Application(program_id=program.id, applicant_id="learner-1", status=ApplicationStatus.REJECTED))
    test_db.add(Application(program_id=program.id, applicant_id="learner-1", status=ApplicationStatus.PENDING))
    test_db.commit()

    test_db.add(Application(program_id=program.id, applicant_id="learner-1", status=ApplicationStatus.WAITLISTED))
    with pytest.raises(IntegrityError):
        test_db.commit()
    test_db.rollback()
