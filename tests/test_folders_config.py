import pytest

from webarchive.core.errors import NotFoundError, ValidationError
from webarchive.services.folder_service import create_folder, get_folder, list_folders, require_folder
from webarchive.services.settings_service import get_should_show_recent, set_should_show_recent


# ========== DOSSIERS ==========
def test_create_folder_strips_name(db):
    folder = create_folder(db, "  Reading list ")
    assert folder.name == "Reading list"
    assert [f.id for f in list_folders(db)] == [folder.id]

def test_create_folder_empty_name(db):
    with pytest.raises(ValidationError):
        create_folder(db, "   ")

def test_flagged_folder_is_hidden(db):
    kept = create_folder(db, "Kept")
    hidden = create_folder(db, "Hidden")
    hidden.is_deleted = True
    db.commit()

    assert [f.id for f in list_folders(db)] == [kept.id]
    assert get_folder(db, hidden.id) is None
    with pytest.raises(NotFoundError):
        require_folder(db, hidden.id)

def test_api_folders(client, auth_headers):
    response = client.post("/folders", headers=auth_headers, json={"name": "Inbox"})
    assert response.status_code == 201
    folder_id = response.json()["id"]

    assert client.get(f"/folders/{folder_id}", headers=auth_headers).json()["name"] == "Inbox"
    assert [f["name"] for f in client.get("/folders", headers=auth_headers).json()] == ["Inbox"]
    assert client.get("/folders/999", headers=auth_headers).status_code == 404


# ========== CONFIG ==========
def test_should_show_recent_defaults_to_true(db):
    assert get_should_show_recent(db) is True

def test_should_show_recent_upsert(db):
    set_should_show_recent(db, False)
    assert get_should_show_recent(db) is False
    set_should_show_recent(db, True)
    assert get_should_show_recent(db) is True

def test_api_show_recent(client, auth_headers):
    assert client.get("/config/show-recent", headers=auth_headers).json() == {"should_show_recent": True}

    response = client.put("/config/show-recent", headers=auth_headers, json={"should_show_recent": False})
    assert response.status_code == 200
    assert client.get("/config/show-recent", headers=auth_headers).json() == {"should_show_recent": False}
