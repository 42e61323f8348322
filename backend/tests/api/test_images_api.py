from __future__ import annotations

from datetime import timedelta

import pytest

from gallery.models.user import User
from tests.factories.image import BASE_TIME, ImageFactory
from tests.helpers.auth import signup
from tests.helpers.http import auth_headers, build_url, upload_part


@pytest.fixture()
def account(client):
    return signup(client, username="ivy")


@pytest.fixture()
def headers(account):
    return auth_headers(account["accessToken"])


@pytest.fixture()
def owner(session, account):
    return session.get(User, account["user"]["id"])


def _post_images(client, headers, parts):
    return client.post(
        "/images/upload",
        data={"images": parts},
        headers=headers,
        content_type="multipart/form-data",
    )


class TestUpload:
    def test_uploads_batch(self, client, headers, account, storage):
        parts = [upload_part("a.png"), upload_part("b.jpg", b"\xff\xd8", "image/jpeg")]

        response = _post_images(client, headers, parts)

        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        assert body["count"] == 2
        assert body["message"] == "Successfully uploaded 2 images"
        assert [i["fileName"] for i in body["data"]] == ["a.png", "b.jpg"]
        assert all(i["userId"] == account["user"]["id"] for i in body["data"])
        assert len(storage) == 2

    def test_validation_errors_listed(self, client, headers, storage):
        parts = [
            upload_part("ok.png"),
            upload_part("big.png", b"x" * (5 * 1024 * 1024 + 1)),
            upload_part("notes.txt", b"hi", "text/plain"),
        ]

        response = _post_images(client, headers, parts)

        assert response.status_code == 400
        body = response.get_json()
        assert body["detail"] == "File validation failed"
        assert body["details"]["errors"] == [
            "File 2 (big.png) exceeds maximum size of 5MB",
            "File 3 (notes.txt) is not a valid image type",
        ]
        assert len(storage) == 0

    def test_no_files(self, client, headers):
        response = _post_images(client, headers, [])

        assert response.status_code == 400
        assert response.get_json()["detail"] == "No files uploaded"

    def test_too_many_files(self, client, headers, storage):
        parts = [upload_part(f"f{i}.png") for i in range(11)]

        response = _post_images(client, headers, parts)

        assert response.status_code == 400
        assert len(storage) == 0


class TestList:
    def test_lists_only_own_images_oldest_first(self, client, headers, owner):
        newer = ImageFactory(user=owner, uploaded_at=BASE_TIME + timedelta(days=1))
        older = ImageFactory(user=owner, uploaded_at=BASE_TIME)
        ImageFactory()

        response = client.get("/images", headers=headers)

        assert response.status_code == 200
        body = response.get_json()
        assert body["totalItems"] == 2
        assert body["pageNumber"] == 1
        assert body["pageSize"] == 20
        assert [i["id"] for i in body["data"]] == [older.id, newer.id]

    def test_page_size_is_clamped(self, client, headers):
        response = client.get(build_url("/images", pageSize=500, pageNumber=-5), headers=headers)

        body = response.get_json()
        assert response.status_code == 200
        assert body["pageSize"] == 100
        assert body["pageNumber"] == 1

    def test_garbage_pagination_uses_defaults(self, client, headers):
        response = client.get(build_url("/images", pageSize="abc", pageNumber="x"), headers=headers)

        body = response.get_json()
        assert (body["pageNumber"], body["pageSize"]) == (1, 20)

    def test_size_and_date_filters(self, client, headers, owner):
        for i, size in enumerate((0, 100, 200)):
            ImageFactory(
                user=owner,
                size=size,
                uploaded_at=BASE_TIME + timedelta(hours=i),
            )

        only_empty = client.get(build_url("/images", maxSize=0), headers=headers).get_json()
        assert [i["size"] for i in only_empty["data"]] == [0]

        window = client.get(
            build_url(
                "/images",
                createdAfter="2024-01-01T01:00:00Z",
                createdBefore="2024-01-01T02:00:00+00:00",
            ),
            headers=headers,
        ).get_json()
        assert [i["size"] for i in window["data"]] == [100, 200]

    def test_invalid_size_range(self, client, headers):
        response = client.get(build_url("/images", minSize=10, maxSize=5), headers=headers)
        assert response.status_code == 422

    def test_requires_token(self, client):
        response = client.get("/images")

        assert response.status_code == 401
        assert response.mimetype == "application/problem+json"


class TestGet:
    def test_own_image(self, client, headers, owner):
        image = ImageFactory(user=owner)

        response = client.get(f"/images/{image.id}", headers=headers)

        assert response.status_code == 200
        assert response.get_json()["publicURL"] == image.public_url

    def test_uploaded_image_reads_back(self, client, headers, storage):
        payload = b"\xff\xd8" + b"j" * 40
        uploaded = _post_images(client, headers, [upload_part("cat.jpg", payload, "image/jpeg")])
        image_id = uploaded.get_json()["data"][0]["id"]

        response = client.get(f"/images/{image_id}", headers=headers)

        assert response.status_code == 200
        body = response.get_json()
        assert body["fileName"] == "cat.jpg"
        assert body["contentType"] == "image/jpeg"
        assert body["size"] == len(payload)

    def test_foreign_image_is_not_found(self, client, headers):
        foreign = ImageFactory()

        response = client.get(f"/images/{foreign.id}", headers=headers)

        assert response.status_code == 404
        assert response.get_json()["code"] == "not_found"
