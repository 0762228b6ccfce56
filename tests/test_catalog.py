import pytest

from models import Enrollment, Subject
from services import catalog, electives
from services.errors import ConflictError, ReferentialError, ValidationError


def test_parse_subject_payload_full():
    fields = catalog.parse_subject_payload(
        {
            "name": "  Algebra ",
            "degreeProgramID": "P",
            "year": 1,
            "term": "semester",
            "credits": 6,
            "hours": 96.5,
            "isElective": True,
            "requirements": [{"id": "X"}],
        },
        partial=False,
    )
    assert fields["name"] == "Algebra"
    assert fields["degree_program_id"] == "P"
    assert fields["term"] == "semester"
    assert fields["credits"] == 6.0
    assert fields["is_elective"] is True
    assert fields["requirements"][0].requirement_id == "X"


def test_parse_subject_payload_create_defaults_requirements():
    fields = catalog.parse_subject_payload({"name": "A", "degreeProgramID": "P"}, partial=False)
    assert fields == {"name": "A", "degree_program_id": "P", "requirements": []}


def test_parse_subject_payload_partial_only_present_keys():
    assert catalog.parse_subject_payload({"year": None}, partial=True) == {"year": None}


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"degreeProgramID": "P"}, "name is required"),
        ({"name": "A"}, "degreeProgramID is required"),
        ({"name": "A", "degreeProgramID": "P", "year": 0}, "year must be at least 1"),
        ({"name": "A", "degreeProgramID": "P", "year": float("inf")}, "year must be an integer"),
        ({"name": "A", "degreeProgramID": "P", "year": float("nan")}, "year must be an integer"),
        ({"name": "A", "degreeProgramID": "P", "year": 2**31}, "year is out of range"),
        ({"name": "A", "degreeProgramID": "P", "hours": float("inf")}, "hours must be a number"),
        ({"name": "A", "degreeProgramID": "P", "term": "weekly"}, "invalid term"),
        ({"name": "A", "degreeProgramID": "P", "credits": -1}, "credits must be at least 0"),
        ({"name": "A", "degreeProgramID": "P", "isElective": "yes"}, "isElective must be a boolean"),
        ({"name": "x" * 192, "degreeProgramID": "P"}, "name is too long"),
    ],
)
def test_parse_subject_payload_rejects(payload, message):
    with pytest.raises(ValidationError) as exc:
        catalog.parse_subject_payload(payload, partial=False)
    assert exc.value.message == message


def test_empty_program_id_on_update():
    with pytest.raises(ValidationError, match="degreeProgramID cannot be empty"):
        catalog.parse_subject_payload({"degreeProgramID": "  "}, partial=True)


def test_create_subject_unknown_program_is_400(session):
    with pytest.raises(ReferentialError) as exc:
        catalog.create_subject(session, name="A", degree_program_id="NOPE")
    assert exc.value.status_code == 400
    assert exc.value.message == "unknown program"


def test_create_subject_duplicate_id(session, make_program, make_subject):
    make_program("P")
    make_subject("A")
    with pytest.raises(ConflictError):
        catalog.create_subject(session, name="again", degree_program_id="P", subject_id="A")


def test_list_subjects_orders_by_year_then_name(session, make_program, make_subject):
    make_program("P")
    make_subject("Z", name="Zeta", year=1)
    make_subject("N", name="Null year", year=None)
    make_subject("B", name="Beta", year=2)
    make_subject("A", name="Alpha", year=1)
    make_subject("C", name="Gamma", year=2, requirements=["A"])

    views = catalog.list_subjects(session, "P")
    assert [v.id for v in views] == ["A", "Z", "B", "C", "N"]
    gamma = views[3].to_dict()
    assert gamma["requirements"] == [{"id": "A", "name": "Alpha", "minStatus": "passed"}]


def test_list_subjects_unknown_program(session):
    with pytest.raises(ReferentialError, match="Program not found"):
        catalog.list_subjects(session, "NOPE")


def test_update_subject_fields(session, make_program, make_subject):
    make_program("P")
    make_subject("A")
    view = catalog.update_subject(session, "A", {"name": "Analysis", "year": None, "hours": 128.0})
    assert view.name == "Analysis"
    assert view.year is None
    assert view.hours == 128.0


def test_update_subject_not_found(session):
    with pytest.raises(ReferentialError) as exc:
        catalog.update_subject(session, "NOPE", {"name": "x"})
    assert exc.value.status_code == 404


def test_move_subject_to_other_program(session, make_program, make_subject):
    make_program("P")
    make_program("Q")
    make_subject("A")

    view = catalog.update_subject(session, "A", {"degree_program_id": "Q"})
    assert view.degree_program_id == "Q"


def test_move_to_unknown_program(session, make_program, make_subject):
    make_program("P")
    make_subject("A")
    with pytest.raises(ReferentialError) as exc:
        catalog.update_subject(session, "A", {"degree_program_id": "NOPE"})
    assert exc.value.status_code == 400


def test_move_rejected_while_required_by_others(session, make_program, make_subject):
    make_program("P")
    make_program("Q")
    make_subject("A")
    make_subject("B", requirements=["A"])

    with pytest.raises(ValidationError, match="requirement links"):
        catalog.update_subject(session, "A", {"degree_program_id": "Q"})
    session.expire_all()
    assert session.get(Subject, "A").degree_program_id == "P"


def test_move_rejected_while_in_pool(session, make_program, make_subject):
    make_program("P")
    make_program("Q")
    make_subject("A")
    pool = electives.create_pool(session, "P", {"name": "Humanities"})
    electives.add_pool_subject(session, "P", pool.id, {"subject_id": "A"})

    with pytest.raises(ValidationError):
        catalog.update_subject(session, "A", {"degree_program_id": "Q"})


def test_move_with_own_requirements_needs_replacement(session, make_program, make_subject):
    make_program("P")
    make_program("Q")
    make_subject("A")
    make_subject("B", requirements=["A"])

    with pytest.raises(ValidationError):
        catalog.update_subject(session, "B", {"degree_program_id": "Q"})

    view = catalog.update_subject(session, "B", {"degree_program_id": "Q", "requirements": []})
    assert view.degree_program_id == "Q"
    assert view.requirements == []


def test_create_program_enrolls_creator(session, make_user):
    user_id = make_user()
    view = catalog.create_program(session, name="Systems", university="UTN", creator_id=user_id)
    assert session.get(Enrollment, (user_id, view.id)) is not None


def test_create_program_duplicate_id(session, make_program):
    make_program("P")
    with pytest.raises(ConflictError):
        catalog.create_program(session, name="again", program_id="P")


def test_delete_program_cascades_subjects(session, make_program, make_subject):
    make_program("P")
    make_subject("A")
    catalog.delete_program(session, "P")
    assert session.get(Subject, "A") is None
