"""HTTP-level tests for the case endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from app.config.settings import settings
from app.controllers.dependencies import get_case_repository
from app.main import create_app
from app.services.llm_client import get_llm_client
from app.services.storage import get_media_storage
from app.services.transcribe import get_transcribe_service

from conftest import InMemoryCaseRepository, stored_files


def _upload(client: TestClient, payload: bytes = b"fake-webm", **fields):
    return client.post(
        "/upload",
        files={"voice": ("emergency_audio.webm", payload, "audio/webm")},
        data=fields,
    )


def test_upload_creates_case(client, media_storage):
    response = _upload(client, latitude="40.7128", longitude="-74.0060")

    assert response.status_code == 201
    body = response.json()
    assert body["text"] == "Cardiac arrest"
    assert body["score"] == 3
    assert body["gpsCoords"] == {"latitude": 40.7128, "longitude": -74.006}
    assert body["voice"].startswith("audio/")
    assert body["voice"].endswith(".webm")
    assert body["video"] is None
    assert body["createdAt"] == body["updatedAt"]
    assert (media_storage.root / body["voice"]).read_bytes() == b"fake-webm"


def test_uploaded_case_round_trips(client):
    created = _upload(client, latitude="1.5", longitude="2.5").json()

    fetched = client.get(f"/uploads/{created['id']}")

    assert fetched.status_code == 200
    assert fetched.json() == created


def test_upload_with_video_stores_both_files(client, media_storage):
    response = client.post(
        "/upload",
        files=[
            ("voice", ("emergency_audio.webm", b"voice", "audio/webm")),
            ("video", ("emergency_video.webm", b"video", "video/webm")),
        ],
    )

    assert response.status_code == 201
    body = response.json()
    assert body["video"].startswith("video/")
    assert len(stored_files(media_storage)) == 2


def test_upload_without_voice_is_rejected(client, repository, transcriber, media_storage):
    response = client.post("/upload", data={"latitude": "1", "longitude": "2"})

    assert response.status_code == 400
    assert response.json() == {"message": "Voice file missing!", "error": "Voice file missing!"}
    assert repository.records == {}
    assert transcriber.calls == []
    assert stored_files(media_storage) == []


def test_upload_with_empty_voice_is_rejected(client, repository):
    response = _upload(client, payload=b"")

    assert response.status_code == 400
    assert repository.records == {}


def test_upload_without_location_defaults_to_origin(client):
    body = _upload(client).json()

    assert body["gpsCoords"] == {"latitude": 0.0, "longitude": 0.0}


def test_upload_store_failure_returns_500(client, repository, media_storage):
    repository.fail_writes = True

    response = _upload(client)

    assert response.status_code == 500
    assert response.json()["message"] == "Upload failed"
    assert len(stored_files(media_storage)) == 1


def test_list_returns_newest_first(client):
    first = _upload(client).json()
    second = _upload(client).json()

    response = client.get("/uploads")

    assert response.status_code == 200
    assert [case["id"] for case in response.json()] == [second["id"], first["id"]]


def test_list_empty(client):
    response = client.get("/uploads")

    assert response.status_code == 200
    assert response.json() == []


def test_get_unknown_case_returns_404(client):
    response = client.get("/uploads/6f1c2f0e-3a5b-4c7d-9e8f-0a1b2c3d4e5f")

    assert response.status_code == 404
    assert response.json()["message"] == "Data not found"


def test_invalid_id_returns_400(client):
    response = client.delete("/uploads/not-a-valid-id")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid ID format"


def test_delete_case_twice(client, media_storage):
    created = _upload(client).json()

    first = client.delete(f"/uploads/{created['id']}")
    second = client.delete(f"/uploads/{created['id']}")

    assert first.status_code == 200
    assert first.json() == {"message": "Data successfully deleted", "id": created["id"]}
    assert second.status_code == 404
    # Media stays on disk unless cascade delete is switched on.
    assert (media_storage.root / created["voice"]).exists()


def test_delete_case_cascades_to_media_when_enabled(client, media_storage, monkeypatch):
    monkeypatch.setattr(settings.media, "delete_on_case_delete", True)
    created = _upload(client).json()

    response = client.delete(f"/uploads/{created['id']}")

    assert response.status_code == 200
    assert not (media_storage.root / created["voice"]).exists()


def test_delete_all_cases(client, repository):
    _upload(client)
    _upload(client)

    response = client.delete("/uploads")

    assert response.status_code == 200
    assert response.json() == {"message": "Database cleared!", "deletedCount": 2}
    assert client.get("/uploads").json() == []


def test_delete_all_on_empty_store(client):
    response = client.get("/delete-all-db")

    assert response.status_code == 200
    assert response.json()["deletedCount"] == 0


def test_delete_all_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "enable_bulk_delete", False)
    _upload(client)

    response = client.delete("/uploads")

    assert response.status_code == 403
    assert len(client.get("/uploads").json()) == 1


def test_stored_media_is_served(media_storage, transcriber, completion_client, monkeypatch):
    monkeypatch.setattr(settings.media, "root", str(media_storage.root))
    app = create_app()
    repository = InMemoryCaseRepository()
    app.dependency_overrides[get_case_repository] = lambda: repository
    app.dependency_overrides[get_media_storage] = lambda: media_storage
    app.dependency_overrides[get_transcribe_service] = lambda: transcriber
    app.dependency_overrides[get_llm_client] = lambda: completion_client
    client = TestClient(app)

    created = _upload(client, payload=b"recording").json()
    response = client.get(f"/uploads/{created['voice']}")

    assert response.status_code == 200
    assert response.content == b"recording"


def test_health_and_metrics(client):
    assert client.get("/health").json()["status"] == "healthy"

    _upload(client)
    metrics = client.get("/metrics")

    assert metrics.status_code == 200
    assert "intake_cases_created_total" in metrics.text


def test_malformed_multipart_returns_error_shape(client, repository):
    response = client.post(
        "/upload",
        content=b"--xx\r\nbroken",
        headers={"content-type": "multipart/form-data"},
    )

    assert response.status_code == 400
    body = response.json()
    assert set(body) == {"message", "error"}
    assert body["message"] == "Bad Request"
    assert repository.records == {}


def test_unknown_route_returns_error_shape(client):
    response = client.get("/no-such-route")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found", "error": "Not Found"}


def test_store_not_opened_returns_503(monkeypatch):
    from app.main import app

    monkeypatch.setattr(app.state, "database", None, raising=False)
    client = TestClient(app)

    response = client.get("/uploads")

    assert response.status_code == 503
    assert response.json() == {
        "message": "Database is not initialised",
        "error": "Database is not initialised",
    }


def test_request_id_is_echoed_or_generated(client):
    echoed = client.get("/uploads", headers={"X-Request-ID": "call-42"})
    generated = client.get("/uploads")

    assert echoed.headers["X-Request-ID"] == "call-42"
    assert len(generated.headers["X-Request-ID"]) == 32
