from __future__ import annotations

from tests.helpers.auth import signup
from tests.helpers.http import auth_headers, upload_part


def test_upload_file(client, storage):
    token = signup(client)["accessToken"]

    response = client.post(
        "/file/upload",
        data={"file": upload_part("holiday pic.png", b"abcdef")},
        headers=auth_headers(token),
        content_type="multipart/form-data",
    )

    assert response.status_code == 201
    body = response.get_json()
    assert body["fileName"] == "holiday pic.png"
    assert body["size"] == 6
    assert body["contentType"] == "image/png"
    assert body["publicURL"].startswith(
        "https://storage.googleapis.com/test-bucket/default/holiday_pic.png_"
    )
    assert len(storage) == 1


def test_upload_without_file(client, storage):
    token = signup(client)["accessToken"]

    response = client.post(
        "/file/upload", data={}, headers=auth_headers(token), content_type="multipart/form-data"
    )

    assert response.status_code == 400
    assert response.get_json()["detail"] == "No file provided"
    assert len(storage) == 0


def test_upload_requires_token(client):
    response = client.post(
        "/file/upload",
        data={"file": upload_part("a.png")},
        content_type="multipart/form-data",
    )

    assert response.status_code == 401
    assert response.mimetype == "application/problem+json"
