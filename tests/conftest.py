import os
import tempfile

# point the app at throwaway storage before certregistry.settings is imported
_TMP = tempfile.mkdtemp(prefix="certregistry-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["CONTENT_STORE"] = "ipfs"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel

from certregistry.content_store import get_content_store
from certregistry.crud import engine
from certregistry.errors import ContentStoreError
from certregistry.main import app
from certregistry.settings import settings


class FakeContentStore:
    def __init__(self):
        self.blobs = {}
        self.calls = 0
        self.fail = False

    def store(self, data, name=None):
        self.calls += 1
        if self.fail:
            raise ContentStoreError("Content store upload failed")
        cid = f"bafyfake{len(self.blobs):04d}"
        self.blobs[cid] = data
        return cid


@pytest.fixture(autouse=True)
def db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield engine


@pytest.fixture
def content_store():
    return FakeContentStore()


@pytest.fixture
def client(content_store):
    app.dependency_overrides[get_content_store] = lambda: content_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def upload_dir():
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    return settings.UPLOAD_DIR
