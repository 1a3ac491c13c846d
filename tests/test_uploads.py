"""
Image uploads: route lookup, validation limits and local storage.
"""
import pytest

from config.upload_config import MB
from src.app import app
from src.storage import LocalFileStorage, generate_filename, generate_organized_path, get_storage

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def storage(client, tmp_path):
    backend = LocalFileStorage(str(tmp_path), "http://testserver")
    app.dependency_overrides[get_storage] = lambda: backend
    return backend


class TestUploadRoute:

    def test_requires_authentication(self, client, storage):
        response = client.post("/v1/uploads/post_image", files={"files": ("a.png", PNG, "image/png")})
        assert response.status_code == 401

    def test_unknown_route(self, client, storage, make_user, auth_headers):
        response = client.post(
            "/v1/uploads/banner", files={"files": ("a.png", PNG, "image/png")}, headers=auth_headers(make_user())
        )
        assert response.status_code == 404

    def test_rejects_non_images(self, client, storage, make_user, auth_headers):
        response = client.post(
            "/v1/uploads/post_image",
            files={"files": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers(make_user()),
        )
        assert response.status_code == 415

    def test_rejects_too_many_files(self, client, storage, make_user, auth_headers):
        response = client.post(
            "/v1/uploads/profile_image",
            files=[("files", ("a.png", PNG, "image/png")), ("files", ("b.png", PNG, "image/png"))],
            headers=auth_headers(make_user()),
        )
        assert response.status_code == 400

    def test_rejects_large_files(self, client, storage, make_user, auth_headers):
        big = PNG + b"\x00" * (4 * MB)
        response = client.post(
            "/v1/uploads/post_image",
            files={"files": ("big.png", big, "image/png")},
            headers=auth_headers(make_user()),
        )
        assert response.status_code == 413

    def test_background_allows_larger_files(self, client, storage, make_user, auth_headers):
        big = PNG + b"\x00" * (4 * MB)
        response = client.post(
            "/v1/uploads/profile_background",
            files={"files": ("big.png", big, "image/png")},
            headers=auth_headers(make_user()),
        )
        assert response.status_code == 201

    def test_stores_file(self, client, storage, make_user, auth_headers, tmp_path):
        user = make_user()
        response = client.post(
            "/v1/uploads/post_image",
            files={"files": ("Photo.PNG", PNG, "image/png")},
            headers=auth_headers(user),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["uploaded_by"] == user.id
        assert body["file_urls"] == [body["file_url"]]
        assert body["file_url"].startswith(f"http://testserver/uploads/posts/{user.id}/")
        assert body["file_url"].endswith(".png")

        stored = list((tmp_path / "posts" / user.id).iterdir())
        assert len(stored) == 1
        assert stored[0].read_bytes() == PNG


class TestStorageHelpers:

    def test_generate_filename_keeps_extension(self):
        name = generate_filename("Holiday.JPG")
        assert name.endswith(".jpg")
        assert name != generate_filename("Holiday.JPG")

    def test_organized_path(self):
        assert generate_organized_path("avatars", "USR-1-ABCDEFGH", "x.png") == "avatars/USR-1-ABCDEFGH/x.png"
        assert generate_organized_path("avatars", None, "x.png") == "avatars/x.png"
