import hashlib

import pytest

from certregistry import certificates, crud
from certregistry.errors import DuplicateContent, ValidationError


def test_content_digest_is_deterministic():
    data = b"%PDF-1.7 transcript"
    assert certificates.content_digest(data) == certificates.content_digest(data)
    assert certificates.content_digest(data) == hashlib.sha256(data).hexdigest()
    assert certificates.content_digest(data) != certificates.content_digest(data + b"\n")


@pytest.mark.parametrize("raw", ["ABCDEF", "0xabcdef", "  0XAbCdEf \n"])
def test_normalize_hash(raw):
    assert certificates.normalize_hash(raw) == "abcdef"


def test_submit_persists_record(content_store):
    out = certificates.submit(b"bytes", "0xAB", "a.pdf", content_store)
    rec = crud.get_certificate_by_hash(out["content_hash"])
    assert rec.owner_wallet == "0xAB"
    assert rec.content_id == out["content_id"]
    assert rec.created_at is not None


def test_submit_trims_wallet(content_store):
    out = certificates.submit(b"bytes", "  0xAB ", "a.pdf", content_store)
    assert crud.get_certificate_by_hash(out["content_hash"]).owner_wallet == "0xAB"


@pytest.mark.parametrize("data,wallet", [(None, "0xAB"), (b"", "0xAB"), (b"x", None), (b"x", "")])
def test_submit_validation(content_store, data, wallet):
    with pytest.raises(ValidationError):
        certificates.submit(data, wallet, "a.pdf", content_store)
    assert content_store.calls == 0


def test_insert_race_maps_to_duplicate(content_store, monkeypatch):
    # both requests pass the existence check before either inserts
    certificates.submit(b"same", "0xAB", "a.pdf", content_store)
    monkeypatch.setattr(crud, "get_certificate_by_hash", lambda h: None)

    with pytest.raises(DuplicateContent):
        certificates.submit(b"same", "0xCD", "b.pdf", content_store)
    assert len(crud.list_certificates()) == 1
    # second copy reached the store before the insert failed
    assert content_store.calls == 2


def test_create_certificate_unique_hash():
    row = {"owner_wallet": "0xAB", "file_name": "a.pdf", "content_hash": "ab" * 32, "content_id": "bafy1"}
    crud.create_certificate(row)
    with pytest.raises(DuplicateContent):
        crud.create_certificate(dict(row, content_id="bafy2"))


def test_submit_with_hash_mismatch(content_store):
    with pytest.raises(ValidationError):
        certificates.submit_with_hash(b"data", "0xAB", "t.pdf", "00" * 32, content_store)
    assert content_store.calls == 0


def test_delete_certificate_not_found():
    from certregistry.errors import NotFound

    with pytest.raises(NotFound):
        certificates.delete_certificate(42)


def test_create_certificate_sets_timestamp():
    row = {"owner_wallet": "0xAB", "file_name": "a.pdf", "content_hash": "cd" * 32, "content_id": "bafy3"}
    cert = crud.create_certificate(row)
    assert cert.id is not None
    assert cert.created_at is not None
    assert crud.list_certificates()[0].content_hash == "cd" * 32
