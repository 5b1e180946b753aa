import pytest

from certregistry import roles
from certregistry.errors import NotFound, ValidationError


def test_upsert_is_idempotent_overwrite():
    roles.upsert_role("0xCD", "admin")
    roles.upsert_role("0xCD", "admin")
    roles.upsert_role("0xCD", "viewer")
    assert roles.list_roles() == {"0xCD": "viewer"}
    assert roles.get_role("0xCD") == "viewer"


@pytest.mark.parametrize("wallet,role", [(None, "admin"), ("0xCD", None), (" ", "admin"), ("0xCD", "")])
def test_upsert_validation(wallet, role):
    with pytest.raises(ValidationError):
        roles.upsert_role(wallet, role)


def test_missing_wallet():
    with pytest.raises(NotFound):
        roles.get_role("0xZZ")
    with pytest.raises(NotFound):
        roles.delete_role("0xZZ")


def test_wallet_normalized_on_every_operation():
    roles.upsert_role(" 0xCD ", "admin")
    assert roles.get_role("0xCD ") == "admin"
    assert roles.list_roles() == {"0xCD": "admin"}
    roles.delete_role("  0xCD")
    with pytest.raises(NotFound):
        roles.get_role("0xCD")
