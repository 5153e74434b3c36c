import json
import string
import pytest
from datetime import datetime, timedelta

from webarchive.core.errors import ConflictError, NotFoundError, ValidationError
from webarchive.models.share_link import ShareLink
from webarchive.services import share_service
from webarchive.services.codes import SHARE_CODE_ALPHABET, generate_share_code
from webarchive.services.share_service import (
    create_share_link,
    delete_share_link,
    get_share_link_by_code,
    is_share_link_expired,
    list_all_share_links,
    list_share_links_for_page,
)

NOW = datetime(2026, 3, 1, 10, 0, 0)


# ============ CODES ============

def test_share_code_shape():
    code = generate_share_code()
    assert len(code) == 12
    assert set(code) <= set(string.ascii_letters + string.digits)
    assert len(SHARE_CODE_ALPHABET) == 62

def test_share_codes_differ():
    assert len({generate_share_code() for _ in range(100)}) == 100


# ============ SERVICE ============

def test_create_never_expires(db, make_page):
    page = make_page("A")
    link = create_share_link(db, page.id, None, now=NOW)

    assert link.expires_at is None
    assert get_share_link_by_code(db, link.share_code).id == link.id
    assert is_share_link_expired(link, now=NOW + timedelta(days=3650)) is False

def test_create_zero_hours_never_expires(db, make_page):
    page = make_page("A")
    assert create_share_link(db, page.id, 0, now=NOW).expires_at is None

def test_create_with_expiry(db, make_page):
    page = make_page("A")
    link = create_share_link(db, page.id, 1, now=NOW)

    assert link.expires_at == NOW + timedelta(hours=1)
    # toujours lisible, même expiré : seul l'usage est bloqué
    assert get_share_link_by_code(db, link.share_code) is not None
    assert is_share_link_expired(link, now=NOW) is False
    assert is_share_link_expired(link, now=NOW + timedelta(minutes=61)) is True
    assert get_share_link_by_code(db, link.share_code) is not None

@pytest.mark.parametrize("hours", [-1, 1e12, 1e9, float("nan"), float("inf"), float("-inf")])
def test_create_invalid_expiry(db, make_page, hours):
    page = make_page("A")
    with pytest.raises(ValidationError):
        create_share_link(db, page.id, hours, now=NOW)
    assert db.query(ShareLink).count() == 0

def test_create_for_missing_page(db):
    with pytest.raises(NotFoundError):
        create_share_link(db, 999)

def test_create_for_deleted_page(db, make_page):
    page = make_page("A", is_deleted=True)
    with pytest.raises(NotFoundError):
        create_share_link(db, page.id)

def test_code_collision_is_a_conflict(db, make_page, monkeypatch):
    """Pas de retry : la contrainte unique remonte en ConflictError"""
    page = make_page("A")
    monkeypatch.setattr(share_service, "generate_share_code", lambda: "SAMECODE1234")

    create_share_link(db, page.id)
    with pytest.raises(ConflictError):
        create_share_link(db, page.id)
    assert db.query(ShareLink).count() == 1

def test_many_links_per_page(db, make_page):
    page = make_page("A")
    first = create_share_link(db, page.id, now=NOW)
    second = create_share_link(db, page.id, 2, now=NOW + timedelta(minutes=1))

    assert [l.id for l in list_share_links_for_page(db, page.id)] == [second.id, first.id]

def test_get_unknown_code(db):
    assert get_share_link_by_code(db, "doesnotexist") is None

def test_list_all_with_page_title(db, make_page):
    page = make_page("Shared title")
    create_share_link(db, page.id)

    rows = list_all_share_links(db)
    assert len(rows) == 1
    link, title = rows[0]
    assert link.page_id == page.id
    assert title == "Shared title"

def test_delete_share_link(db, make_page):
    page = make_page("A")
    link = create_share_link(db, page.id)
    assert delete_share_link(db, link.id) is True
    assert delete_share_link(db, link.id) is False
    assert get_share_link_by_code(db, link.share_code) is None


# ============ API ============

def test_api_share_lifecycle(client, auth_headers, make_page):
    page = make_page("A")

    response = client.post("/shares", headers=auth_headers, json={"page_id": page.id, "expires_in": 24})
    assert response.status_code == 201
    link = response.json()
    assert len(link["share_code"]) == 12
    assert link["expires_at"] is not None

    listed = client.get(f"/shares/page/{page.id}", headers=auth_headers).json()
    assert [l["id"] for l in listed] == [link["id"]]

    everything = client.get("/shares", headers=auth_headers).json()
    assert everything[0]["page_title"] == "A"

    assert client.delete(f"/shares/{link['id']}", headers=auth_headers).status_code == 204
    assert client.delete(f"/shares/{link['id']}", headers=auth_headers).status_code == 404

def test_api_share_negative_expiry(client, auth_headers, make_page):
    page = make_page("A")
    response = client.post("/shares", headers=auth_headers, json={"page_id": page.id, "expires_in": -3})
    assert response.status_code == 400

@pytest.mark.parametrize("hours", [1e12, float("nan"), float("inf")])
def test_api_share_unrepresentable_expiry(client, auth_headers, make_page, hours):
    page = make_page("A")
    # le client JSON refuse NaN/Infinity, on envoie le corps brut
    body = json.dumps({"page_id": page.id, "expires_in": hours})
    response = client.post("/shares", headers={**auth_headers, "Content-Type": "application/json"}, content=body)
    assert response.status_code == 400

def test_api_share_requires_auth(client, make_page):
    page = make_page("A")
    assert client.post("/shares", json={"page_id": page.id}).status_code == 401


# ============ VUE PUBLIQUE ============

def test_public_view_without_auth(client, db, blob_store, make_page):
    page = make_page("A", content_key="a.html")
    blob_store.put("a.html", b"<html><body>archived</body></html>")
    link = create_share_link(db, page.id)

    response = client.get(f"/share/{link.share_code}")
    assert response.status_code == 200
    assert "archived" in response.text
    assert response.headers["cache-control"] == "public, max-age=3600"

def test_public_view_unknown_code(client):
    assert client.get("/share/unknowncode1").status_code == 404

def test_public_view_expired(client, db, blob_store, make_page):
    page = make_page("A", content_key="a.html")
    blob_store.put("a.html", b"<html/>")
    link = create_share_link(db, page.id, 1, now=datetime(2020, 1, 1))

    assert client.get(f"/share/{link.share_code}").status_code == 410

def test_public_view_deleted_page(client, db, blob_store, make_page):
    from webarchive.services.page_service import delete_page

    page = make_page("A", content_key="a.html")
    blob_store.put("a.html", b"<html/>")
    link = create_share_link(db, page.id)
    delete_page(db, page.id)

    assert client.get(f"/share/{link.share_code}").status_code == 404

def test_public_view_missing_content(client, db, make_page):
    page = make_page("A", content_key="missing.html")
    link = create_share_link(db, page.id)

    assert client.get(f"/share/{link.share_code}").status_code == 404
