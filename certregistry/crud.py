# certregistry/crud.py

from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, Session, select, create_engine

from certregistry.errors import DuplicateContent
from certregistry.models import Certificate, WalletRole
from certregistry.settings import settings


# ---------- Database Setup ----------
def _connect_args(url: str) -> dict:
    # sync routes run in a threadpool; sqlite must allow cross-thread connections
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.DATABASE_URL, echo=False, connect_args=_connect_args(settings.DATABASE_URL))


def init_db():
    """Initialize all SQLModel tables."""
    SQLModel.metadata.create_all(engine)


# ---------- CERTIFICATE CRUD ----------
def create_certificate(obj: dict) -> Certificate:
    """Store a new certificate record; a repeated content hash raises DuplicateContent."""
    with Session(engine) as s:
        cert = Certificate(**obj)
        s.add(cert)
        try:
            s.commit()
        except IntegrityError as exc:
            s.rollback()
            raise DuplicateContent("A certificate with this hash already exists") from exc
        s.refresh(cert)
        return cert


def get_certificate_by_hash(content_hash: str) -> Optional[Certificate]:
    """Fetch a certificate using its content hash."""
    with Session(engine) as s:
        q = select(Certificate).where(Certificate.content_hash == content_hash)
        return s.exec(q).first()


def list_certificates() -> List[Certificate]:
    """List all certificates, newest first."""
    with Session(engine) as s:
        q = select(Certificate).order_by(Certificate.created_at.desc(), Certificate.id.desc())
        return s.exec(q).all()


def delete_certificate(cert_id: int) -> bool:
    with Session(engine) as s:
        cert = s.get(Certificate, cert_id)
        if cert is None:
            return False
        s.delete(cert)
        s.commit()
        return True


# ---------- WALLET ROLES ----------
def upsert_wallet_role(wallet: str, role: str) -> WalletRole:
    """Insert the assignment or overwrite the existing wallet's role."""
    with Session(engine) as s:
        assignment = s.merge(WalletRole(wallet=wallet, role=role))
        s.commit()
        s.refresh(assignment)
        return assignment


def get_wallet_role(wallet: str) -> Optional[WalletRole]:
    with Session(engine) as s:
        return s.get(WalletRole, wallet)


def delete_wallet_role(wallet: str) -> bool:
    with Session(engine) as s:
        assignment = s.get(WalletRole, wallet)
        if assignment is None:
            return False
        s.delete(assignment)
        s.commit()
        return True


def list_wallet_roles() -> Dict[str, str]:
    """Snapshot of every assignment as a wallet -> role mapping."""
    with Session(engine) as s:
        rows = s.exec(select(WalletRole)).all()
        return {r.wallet: r.role for r in rows}
