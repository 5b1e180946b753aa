# certregistry/roles.py
import logging
from typing import Dict, Optional

from . import crud
from .errors import NotFound, ValidationError

log = logging.getLogger("roles")


def _normalize_wallet(wallet: Optional[str]) -> str:
    return (wallet or "").strip()


def upsert_role(wallet: Optional[str], role: Optional[str]) -> None:
    """Assign role to wallet, replacing any role it already had."""
    wallet = _normalize_wallet(wallet)
    role = (role or "").strip()
    if not wallet or not role:
        raise ValidationError("Wallet and role are required")
    crud.upsert_wallet_role(wallet, role)
    log.info("Wallet %s now has role %s", wallet, role)


def delete_role(wallet: str) -> None:
    wallet = _normalize_wallet(wallet)
    if not crud.delete_wallet_role(wallet):
        raise NotFound("Wallet not found")
    log.info("Removed role of wallet %s", wallet)


def get_role(wallet: str) -> str:
    assignment = crud.get_wallet_role(_normalize_wallet(wallet))
    if assignment is None:
        raise NotFound("No role found for this wallet")
    return assignment.role


def list_roles() -> Dict[str, str]:
    return crud.list_wallet_roles()
