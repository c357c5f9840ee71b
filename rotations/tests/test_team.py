import pytest

from rotations.core.errors import NotFound, PermissionDenied, ValidationError
from rotations.schemas.team import TeamMemberCreate, TeamMemberUpdate
from rotations.services import team


@pytest.fixture
def members(test_db, admin):
    return [
        team.create_member(test_db, admin, TeamMemberCreate(name=name, title="Coordinator"))
        for name in ("Alice Moreno", "Bilal Khan", "Chidi Okafor")
    ]


def test_new_members_append_to_the_end(members):
    assert [m.sort_order for m in members] == [0, 1, 2]


def test_explicit_sort_order(test_db, admin, members):
    first = team.create_member(test_db, admin, TeamMemberCreate(name="Dana Ruiz", title="Founder", sort_order=0))

    listed = team.list_members(test_db)

    # Ties on sort_order fall back to creation order
    assert [m.id for m in listed] == [members[0].id, first.id, members[1].id, members[2].id]


def test_reorder_sets_positions(test_db, admin, members):
    alice, bilal, chidi = members

    reordered = team.reorder_members(test_db, admin, [chidi.id, alice.id, bilal.id])

    assert [m.id for m in reordered] == [chidi.id, alice.id, bilal.id]
    assert [m.sort_order for m in reordered] == [0, 1, 2]


@pytest.mark.parametrize("shape", ["missing", "unknown", "duplicate"])
def test_reorder_must_be_a_full_permutation(test_db, admin, members, shape):
    ids = [m.id for m in members]
    if shape == "missing":
        ids = ids[:2]
    elif shape == "unknown":
        ids = ids + [max(ids) + 1000]
    else:
        ids = ids + [ids[0]]

    with pytest.raises(ValidationError) as exc_info:
        team.reorder_members(test_db, admin, ids)

    assert exc_info.value.field == "member_ids"
    assert [m.sort_order for m in team.list_members(test_db)] == [0, 1, 2]


def test_delete_hides_member_and_reorder_skips_it(test_db, admin, members):
    alice, bilal, chidi = members

    team.delete_member(test_db, admin, bilal.id)

    assert [m.id for m in team.list_members(test_db)] == [alice.id, chidi.id]
    with pytest.raises(NotFound):
        team.get_member(test_db, bilal.id)
    reordered = team.reorder_members(test_db, admin, [chidi.id, alice.id])
    assert [m.id for m in reordered] == [chidi.id, alice.id]


def test_update_keeps_name_and_title_required(test_db, admin, members):
    member = members[0]

    updated = team.update_member(test_db, admin, member.id, TeamMemberUpdate(bio="Ten years in admissions"))
    assert updated.bio == "Ten years in admissions"
    assert updated.name == "Alice Moreno"

    with pytest.raises(ValidationError) as exc_info:
        team.update_member(test_db, admin, member.id, TeamMemberUpdate(title=None))
    assert exc_info.value.field == "title"


def test_team_is_admin_managed(test_db, learner, members):
    with pytest.raises(PermissionDenied):
        team.create_member(test_db, learner, TeamMemberCreate(name="Eve Stone", title="Intern"))
    with pytest.raises(PermissionDenied):
        team.reorder_members(test_db, learner, [m.id for m in members])
