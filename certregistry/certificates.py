# certregistry/certificates.py
"""
Certificate registration: hash the file, refuse content that is already
registered, push new content to the content store and record its provenance.

Both upload variants go through `submit`; the digest computed here is the only
hash ever persisted.
"""
import hashlib
import logging
from typing import List, Optional

from . import crud
from .errors import DuplicateContent, NotFound, ValidationError
from .models import Certificate

log = logging.getLogger("certificates")


def content_digest(data: bytes) -> str:
    """Hex sha256 of the file bytes."""
    return hashlib.sha256(data).hexdigest()


def normalize_hash(value: str) -> str:
    h = value.strip().lower()
    if h.startswith("0x"):
        h = h[2:]
    return h


def submit(file_bytes: Optional[bytes], owner_wallet: Optional[str], file_name: Optional[str], store) -> dict:
    """
    Register a new certificate file for owner_wallet.

    Returns {"content_id", "content_hash"}. Raises ValidationError for missing
    input and DuplicateContent when the same bytes were registered before, in
    which case the content store is never contacted.
    """
    if not file_bytes or not owner_wallet or not owner_wallet.strip():
        raise ValidationError("PDF file and wallet are required")
    owner_wallet = owner_wallet.strip()

    content_hash = content_digest(file_bytes)
    if crud.get_certificate_by_hash(content_hash) is not None:
        log.info("Rejected duplicate upload %s from %s", content_hash, owner_wallet)
        raise DuplicateContent("A certificate with this hash already exists")

    content_id = store.store(file_bytes, file_name)

    # content stored but the insert lost a race: the cid stays orphaned in the store
    try:
        crud.create_certificate({
            "owner_wallet": owner_wallet,
            "file_name": file_name,
            "content_hash": content_hash,
            "content_id": content_id,
        })
    except DuplicateContent:
        log.warning("Concurrent upload of %s; content %s left unreferenced", content_hash, content_id)
        raise

    log.info("Registered %s as %s for %s", content_hash, content_id, owner_wallet)
    return {"content_id": content_id, "content_hash": content_hash}


def submit_with_hash(
    file_bytes: Optional[bytes],
    owner_wallet: Optional[str],
    file_name: Optional[str],
    claimed_hash: Optional[str],
    store,
) -> dict:
    """Variant where the caller also sends the hash it computed; it must match the file."""
    if not claimed_hash or not claimed_hash.strip():
        raise ValidationError("Missing required data")
    if file_bytes and normalize_hash(claimed_hash) != content_digest(file_bytes):
        raise ValidationError("Hash does not match file content")
    return submit(file_bytes, owner_wallet, file_name, store)


def list_certificates() -> List[Certificate]:
    return crud.list_certificates()


def delete_certificate(cert_id: int) -> None:
    if not crud.delete_certificate(cert_id):
        raise NotFound("Certificate not found")
    log.info("Deleted certificate %s", cert_id)
