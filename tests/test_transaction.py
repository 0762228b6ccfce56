import pytest

from models import DegreeProgram, User
from services.errors import StoreError, ValidationError
from services.transaction import atomic


def test_store_failure_becomes_store_error(session, make_user):
    make_user("a@example.com")

    with pytest.raises(StoreError) as exc:
        with atomic(session, "create user"):
            user = User(email="a@example.com")
            user.set_password("whatever1")
            session.add(user)

    assert exc.value.status_code == 500
    assert exc.value.message == "Error during create user"
    assert session.query(User).count() == 1


def test_domain_error_rolls_back(session):
    with pytest.raises(ValidationError):
        with atomic(session):
            session.add(DegreeProgram(id="P", name="Program"))
            session.flush()
            raise ValidationError("nope")

    assert session.get(DegreeProgram, "P") is None
