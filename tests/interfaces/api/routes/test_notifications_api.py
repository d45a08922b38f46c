"""Integration tests for the HTTP surface of the notification server."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from notification_server.main import create_app

HOST_URL = "http://testserver/image/"


def _create(client, headers, *, content="Deploy done", sender="ci", files=None):
    return client.post(
        "/notification/create",
        data={"content": content, "from": sender},
        files=files,
        headers=headers,
    )


def _assert_error(response, status_code: int, code: str, path: str) -> dict:
    assert response.status_code == status_code
    error = response.json()["error"]
    assert error["code"] == code
    assert error["path"] == path
    assert error["timestamp"].endswith("Z")
    return error


def test_healthcheck_is_public(client: TestClient) -> None:
    response = client.get("/healthcheck")

    assert response.status_code == 200
    assert response.text == "ok"


AUTH_FAILURES = [
    ({}, "Missing Authorization header"),
    ({"Authorization": "Bearer nope"}, "Invalid Bearer token"),
    ({"Authorization": "Token test-token"}, "Invalid Authorization header format. Expected 'Bearer <token>'"),
]


@pytest.mark.parametrize(("headers", "message"), AUTH_FAILURES)
def test_retrieve_requires_token(client: TestClient, headers, message) -> None:
    response = client.post("/notification/retrieve", json={"lastId": 0}, headers=headers)

    error = _assert_error(response, 401, "UNAUTHORIZED", "/notification/retrieve")
    assert error["message"] == message
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.parametrize(("headers", "message"), AUTH_FAILURES)
def test_create_requires_token(client: TestClient, storage_dir, image_factory, headers, message) -> None:
    response = _create(
        client,
        headers,
        files=[("images", ("photo.png", image_factory(), "image/png"))],
    )

    error = _assert_error(response, 401, "UNAUTHORIZED", "/notification/create")
    assert error["message"] == message
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert list(storage_dir.iterdir()) == []


def test_malformed_json_without_token_is_unauthorized(client: TestClient) -> None:
    response = client.post(
        "/notification/retrieve",
        content=b'{"lastId": ',
        headers={"Content-Type": "application/json"},
    )

    _assert_error(response, 401, "UNAUTHORIZED", "/notification/retrieve")


def test_malformed_multipart_without_token_is_unauthorized(client: TestClient) -> None:
    response = client.post(
        "/notification/create",
        content=b"garbage",
        headers={"Content-Type": "multipart/form-data; boundary=xyz"},
    )

    _assert_error(response, 401, "UNAUTHORIZED", "/notification/create")


def test_unknown_path_without_token_is_unauthorized(client: TestClient) -> None:
    response = client.get("/does-not-exist")

    _assert_error(response, 401, "UNAUTHORIZED", "/does-not-exist")


def test_openapi_documents_bearer_scheme(client: TestClient, auth_headers) -> None:
    schema = client.get("/openapi.json", headers=auth_headers).json()

    assert schema["components"]["securitySchemes"]["HTTPBearer"]["scheme"] == "bearer"
    assert schema["paths"]["/notification/create"]["post"]["security"] == [{"HTTPBearer": []}]
    assert "security" not in schema["paths"]["/healthcheck"]["get"]


def test_create_then_fetch_image_and_retrieve(client: TestClient, auth_headers, image_factory) -> None:
    """Exercise creation with an image, the public image URL and retrieval."""

    response = _create(
        client,
        auth_headers,
        files=[("images", ("photo.jpg", image_factory("JPEG"), "image/jpeg"))],
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    created = body["data"]
    assert created["content"] == "Deploy done"
    assert created["from"] == "ci"
    assert isinstance(created["sendOn"], int)
    assert len(created["images"]) == 1
    image_url = created["images"][0]
    assert image_url.startswith(HOST_URL)

    image_response = client.get(image_url[len("http://testserver"):])
    assert image_response.status_code == 200
    assert image_response.headers["content-type"] == "image/webp"
    assert int(image_response.headers["content-length"]) == len(image_response.content)
    assert image_response.content[8:12] == b"WEBP"

    listing = client.post("/notification/retrieve", json={"lastId": 0}, headers=auth_headers)
    assert listing.status_code == 200
    notifications = listing.json()["data"]
    assert [item["id"] for item in notifications] == [created["id"]]
    assert notifications[0]["images"] == [image_url]


def test_retrieve_returns_newest_first(client: TestClient, auth_headers) -> None:
    ids = [_create(client, auth_headers, content=f"n{index}").json()["data"]["id"] for index in range(3)]

    response = client.post("/notification/retrieve", json={"lastId": ids[0]}, headers=auth_headers)

    assert [item["id"] for item in response.json()["data"]] == [ids[2], ids[1]]


def test_retrieve_without_body_starts_from_the_beginning(client: TestClient, auth_headers) -> None:
    created = _create(client, auth_headers).json()["data"]

    response = client.post("/notification/retrieve", headers=auth_headers)

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["data"]] == [created["id"]]


def test_retrieve_on_empty_store(client: TestClient, auth_headers) -> None:
    response = client.post("/notification/retrieve", json={"lastId": 0}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"] == []


def test_retrieve_rejects_negative_cursor(client: TestClient, auth_headers) -> None:
    response = client.post("/notification/retrieve", json={"lastId": -1}, headers=auth_headers)

    _assert_error(response, 400, "VALIDATION_ERROR", "/notification/retrieve")


def test_retrieve_rejects_cursor_beyond_integer_range(client: TestClient, auth_headers) -> None:
    response = client.post("/notification/retrieve", json={"lastId": 2**70}, headers=auth_headers)

    _assert_error(response, 400, "VALIDATION_ERROR", "/notification/retrieve")


def test_retrieve_rejects_malformed_json(client: TestClient, auth_headers) -> None:
    response = client.post(
        "/notification/retrieve",
        content=b'{"lastId": ',
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    error = _assert_error(response, 400, "JSON_PARSING_ERROR", "/notification/retrieve")
    assert error["message"] == "Invalid JSON format in request body"


def test_create_rejects_oversized_content(client: TestClient, auth_headers) -> None:
    response = _create(client, auth_headers, content="x" * 10_001)

    error = _assert_error(response, 400, "VALIDATION_ERROR", "/notification/create")
    assert error["message"] == "Content cannot exceed 10000 characters"


def test_create_requires_content(client: TestClient, auth_headers) -> None:
    response = client.post("/notification/create", data={"from": "ci"}, headers=auth_headers)

    error = _assert_error(response, 400, "VALIDATION_ERROR", "/notification/create")
    assert error["message"] == "Content is required and cannot be blank"


@pytest.mark.parametrize(
    ("filename", "payload", "content_type"),
    [
        ("notes.txt", b"plain text", "text/plain"),
        ("broken.png", b"not really a png", "image/png"),
    ],
)
def test_create_rejects_invalid_images(
    client: TestClient, auth_headers, storage_dir, filename, payload, content_type
) -> None:
    response = _create(client, auth_headers, files=[("images", (filename, payload, content_type))])

    error = _assert_error(response, 400, "VALIDATION_ERROR", "/notification/create")
    assert filename in error["message"]
    assert list(storage_dir.iterdir()) == []
    listing = client.post("/notification/retrieve", json={"lastId": 0}, headers=auth_headers)
    assert listing.json()["data"] == []


def test_unknown_image_is_not_found_without_token(client: TestClient) -> None:
    response = client.get("/image/0b5c6f0e-1111-4222-8333-444455556666")

    error = _assert_error(response, 404, "NOT_FOUND", "/image/0b5c6f0e-1111-4222-8333-444455556666")
    assert error["message"] == "Image not found"


def test_unknown_route_uses_error_envelope(client: TestClient, auth_headers) -> None:
    response = client.get("/does-not-exist", headers=auth_headers)

    _assert_error(response, 404, "NOT_FOUND", "/does-not-exist")


def test_wrong_method_uses_error_envelope(client: TestClient, auth_headers) -> None:
    response = client.get("/notification/create", headers=auth_headers)

    _assert_error(response, 405, "METHOD_NOT_ALLOWED", "/notification/create")


def test_database_errors_are_reported_as_system_errors(
    client: TestClient, auth_headers, monkeypatch
) -> None:
    def _fail(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(
        "notification_server.interfaces.api.routes.notifications.retrieve_notifications_uc", _fail
    )

    response = client.post("/notification/retrieve", json={"lastId": 0}, headers=auth_headers)

    error = _assert_error(response, 500, "SYSTEM_ERROR", "/notification/retrieve")
    assert "locked" not in error["message"]


def test_unexpected_errors_are_reported_generically(settings, auth_headers, monkeypatch) -> None:
    def _fail(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(
        "notification_server.interfaces.api.routes.notifications.retrieve_notifications_uc", _fail
    )

    with TestClient(create_app(settings), raise_server_exceptions=False) as client:
        response = client.post("/notification/retrieve", json={"lastId": 0}, headers=auth_headers)

    error = _assert_error(response, 500, "INTERNAL_SERVER_ERROR", "/notification/retrieve")
    assert error["message"] == "An unexpected error occurred. Please try again later."
