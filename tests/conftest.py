import os
import sys
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# DB SQLite pour les tests AVANT d'importer l'app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient

from webarchive.core.blob_store import LocalBlobStore, get_blob_store
from webarchive.core.database import Base, SessionLocal, engine
from webarchive.core.security import AuthGate, TokenCache, get_auth_gate
from webarchive.main import app
from webarchive.models.folder import Folder
from webarchive.models.page import Page

ADMIN_TOKEN = "admin-secret-123"


@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def auth_gate():
    # cache neuf à chaque test : la DB est recréée, le cache ne doit pas survivre
    return AuthGate(TokenCache(ttl_seconds=600))


@pytest.fixture
def client(blob_store, auth_gate):
    """Client de test FastAPI"""
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_auth_gate] = lambda: auth_gate
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = SessionLocal()
    yield db
    db.close()


@pytest.fixture
def auth_headers(client):
    """Bootstrap du token admin et retourne le header"""
    response = client.post("/auth/login", json={"token": ADMIN_TOKEN})
    assert response.status_code == 201
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def folder(db):
    folder = Folder(name="Inbox")
    db.add(folder)
    db.commit()
    db.refresh(folder)
    return folder


@pytest.fixture
def make_page(db, folder):
    """Insère directement une page (sans passer par l'API)"""
    def _make_page(title="Page", folder_id=None, created_at=None, **fields):
        page = Page(
            title=title,
            page_url=fields.pop("page_url", f"https://example.com/{title}"),
            content_key=fields.pop("content_key", f"{title}.html"),
            folder_id=folder_id or folder.id,
            **fields
        )
        if created_at:
            page.created_at = created_at
        db.add(page)
        db.commit()
        db.refresh(page)
        return page
    return _make_page
