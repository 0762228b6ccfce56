import pytest

from models import ElectivePoolSubject, ElectiveRule
from services import electives
from services.errors import ConflictError, ReferentialError, ValidationError


@pytest.fixture
def pool(session, make_program, make_subject):
    make_program("P")
    make_subject("A")
    make_subject("B")
    return electives.create_pool(session, "P", {"name": "  Humanities ", "description": "Pick two"})


def _rule(pool_id, overrides=None):
    payload = {
        "pool_id": pool_id,
        "applies_from_year": 3,
        "applies_to_year": 5,
        "requirement_type": "credits",
        "minimum_value": 12,
    }
    payload.update(overrides or {})
    return payload


def test_create_pool_trims_name(pool):
    assert pool.name == "Humanities"
    assert pool.description == "Pick two"
    assert pool.subjects == []


def test_create_pool_unknown_program(session):
    with pytest.raises(ReferentialError) as exc:
        electives.create_pool(session, "NOPE", {"name": "x"})
    assert exc.value.status_code == 404


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"name": "   "}, "name is required"),
        ({"name": "x" * 192}, "name is too long"),
        ({"name": "ok", "description": "d" * 501}, "description is too long"),
    ],
)
def test_create_pool_validation(session, make_program, payload, message):
    make_program("P")
    with pytest.raises(ValidationError) as exc:
        electives.create_pool(session, "P", payload)
    assert exc.value.message == message


def test_update_and_delete_pool(session, pool):
    view = electives.update_pool(session, "P", pool.id, {"name": "Arts"})
    assert view.name == "Arts"
    assert view.description == "Pick two"

    electives.delete_pool(session, "P", pool.id)
    with pytest.raises(ReferentialError, match="Pool not found"):
        electives.get_pool(session, "P", pool.id)


def test_pool_of_other_program_is_not_found(session, make_program, pool):
    make_program("Q")
    with pytest.raises(ReferentialError):
        electives.get_pool(session, "Q", pool.id)


def test_add_and_remove_pool_subject(session, pool):
    link = electives.add_pool_subject(session, "P", pool.id, {"subject_id": "A"})
    assert link.to_dict() == {"elective_pool_id": pool.id, "subject_id": "A"}
    assert [s.id for s in electives.get_pool(session, "P", pool.id).subjects] == ["A"]

    electives.remove_pool_subject(session, "P", pool.id, "A")
    assert session.query(ElectivePoolSubject).count() == 0

    with pytest.raises(ReferentialError) as exc:
        electives.remove_pool_subject(session, "P", pool.id, "A")
    assert exc.value.status_code == 404


def test_duplicate_pool_subject_keeps_one_row(session, pool):
    electives.add_pool_subject(session, "P", pool.id, {"subject_id": "A"})
    with pytest.raises(ConflictError):
        electives.add_pool_subject(session, "P", pool.id, {"subject_id": "A"})
    assert session.query(ElectivePoolSubject).count() == 1


def test_pool_subject_must_exist(session, pool):
    with pytest.raises(ReferentialError) as exc:
        electives.add_pool_subject(session, "P", pool.id, {"subject_id": "GHOST"})
    assert exc.value.status_code == 404


def test_pool_subject_from_other_program(session, make_program, make_subject, pool):
    make_program("Q")
    make_subject("Q1", program_id="Q")
    with pytest.raises(ReferentialError) as exc:
        electives.add_pool_subject(session, "P", pool.id, {"subject_id": "Q1"})
    assert exc.value.status_code == 400
    assert session.query(ElectivePoolSubject).count() == 0


def test_create_rule(session, pool):
    rule = electives.create_rule(session, "P", _rule(pool.id, {"applies_to_year": None}))
    assert rule.to_dict() == {
        "id": rule.id,
        "degree_program_id": "P",
        "pool_id": pool.id,
        "applies_from_year": 3,
        "applies_to_year": None,
        "requirement_type": "credits",
        "minimum_value": 12.0,
    }
    assert [r.id for r in electives.list_rules(session, "P")] == [rule.id]


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"applies_from_year": 4, "applies_to_year": 3}, "applies_to_year cannot be lower than applies_from_year"),
        ({"applies_from_year": 0}, "applies_from_year must be greater than 0"),
        ({"minimum_value": 0}, "minimum_value must be greater than 0"),
        ({"requirement_type": "grade"}, "invalid requirement_type"),
        ({"pool_id": ""}, "pool_id is required"),
        ({"minimum_value": float("nan")}, "minimum_value must be a number"),
        ({"minimum_value": float("inf")}, "minimum_value must be a number"),
        ({"applies_from_year": float("inf")}, "applies_from_year must be an integer"),
        ({"applies_to_year": 10**400}, "applies_to_year must be an integer"),
    ],
)
def test_create_rule_validation(session, pool, overrides, message):
    with pytest.raises(ValidationError) as exc:
        electives.create_rule(session, "P", _rule(pool.id, overrides))
    assert exc.value.message == message
    assert session.query(ElectiveRule).count() == 0


def test_rule_pool_must_exist(session, pool):
    with pytest.raises(ReferentialError) as exc:
        electives.create_rule(session, "P", _rule("GHOST"))
    assert exc.value.status_code == 404


def test_rule_pool_of_other_program(session, make_program, pool):
    make_program("Q")
    with pytest.raises(ReferentialError) as exc:
        electives.create_rule(session, "Q", _rule(pool.id))
    assert exc.value.status_code == 400


def test_update_rule_checks_merged_range(session, pool):
    rule = electives.create_rule(session, "P", _rule(pool.id))

    # to=2 alone is fine as a value, but not against the stored from=3
    with pytest.raises(ValidationError):
        electives.update_rule(session, "P", rule.id, {"applies_to_year": 2})

    view = electives.update_rule(session, "P", rule.id, {"applies_from_year": 1, "applies_to_year": 2})
    assert (view.applies_from_year, view.applies_to_year) == (1, 2)

    view = electives.update_rule(session, "P", rule.id, {"requirement_type": "subject_count", "minimum_value": 2})
    assert view.requirement_type == "subject_count"
    assert view.minimum_value == 2.0


def test_delete_pool_drops_links_and_rules(session, pool):
    electives.add_pool_subject(session, "P", pool.id, {"subject_id": "A"})
    electives.create_rule(session, "P", _rule(pool.id))

    electives.delete_pool(session, "P", pool.id)
    assert session.query(ElectivePoolSubject).count() == 0
    assert session.query(ElectiveRule).count() == 0


def test_delete_rule(session, pool):
    rule = electives.create_rule(session, "P", _rule(pool.id))
    electives.delete_rule(session, "P", rule.id)
    with pytest.raises(ReferentialError, match="Rule not found"):
        electives.get_rule(session, "P", rule.id)
