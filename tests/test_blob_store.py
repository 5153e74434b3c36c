import pytest

from webarchive.core.blob_store import LocalBlobStore
from webarchive.core.errors import ValidationError


def test_put_get_delete(tmp_path):
    store = LocalBlobStore(tmp_path)
    store.put("pages/a.html", b"<html/>")

    assert store.get("pages/a.html") == b"<html/>"
    assert store.delete(["pages/a.html"]) == 1
    assert store.get("pages/a.html") is None

def test_get_missing_key(tmp_path):
    assert LocalBlobStore(tmp_path).get("nope.png") is None

def test_delete_tolerates_missing_keys(tmp_path):
    store = LocalBlobStore(tmp_path)
    store.put("a.html", b"x")
    # page sans screenshot : la clé n'existe pas, pas d'erreur
    assert store.delete(["a.html", "screenshot.png"]) == 1
    assert store.delete([]) == 0

@pytest.mark.parametrize("key", ["", "../outside", "/etc/passwd", "a/../../b"])
def test_rejects_keys_outside_root(tmp_path, key):
    with pytest.raises(ValidationError):
        LocalBlobStore(tmp_path).put(key, b"x")
