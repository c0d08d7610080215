from fastapi.testclient import TestClient

from sheetlens.core.config import Settings
from sheetlens.main import create_app
from sheetlens.services.container import build_services
from sheetlens.services.insights import MAX_INSIGHTS, MIN_INSIGHTS
from sheetlens.storage.memory import MemoryBlobStore
from sheetlens.store import keys
from sheetlens.store.memory import MemoryMetadataStore
from tests.conftest import XLSX_TYPE, auth_headers, run

PASSWORD = "correct horse battery"


def signup_and_login(client: TestClient, email: str, name: str = "Test User") -> str:
    response = client.post("/signup", json={"email": email, "password": PASSWORD, "name": name})
    assert response.status_code == 200, response.text
    assert response.json()["user"]["email"] == email

    response = client.post("/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def upload(client: TestClient, token: str, name: str = "sales.xlsx", content: bytes = b"x" * 4096,
           content_type: str = XLSX_TYPE):
    return client.post(
        "/upload",
        files={"file": (name, content, content_type)},
        headers=auth_headers(token),
    )


def test_full_user_journey(client, store):
    token = signup_and_login(client, "ann@example.com", "Ann")

    response = upload(client, token)
    assert response.status_code == 200
    body = response.json()
    assert body["fileName"] == "sales.xlsx"
    assert body["message"] == "File uploaded successfully"
    file_id = body["fileId"]

    files = client.get("/files", headers=auth_headers(token)).json()["files"]
    assert len(files) == 1
    assert files[0]["id"] == file_id
    assert files[0]["fileName"] == "sales.xlsx"
    assert files[0]["size"] == 4096
    assert files[0]["type"] == XLSX_TYPE

    chart = client.get(f"/chart-data/{file_id}", headers=auth_headers(token)).json()["chartData"]
    assert chart["columns"] == ["Month", "Sales", "Profit", "Customers"]
    assert len(chart["data"]) == 6

    response = client.post("/insights", json={"fileId": file_id}, headers=auth_headers(token))
    assert response.status_code == 200
    generated = response.json()["insights"]
    assert generated["fileId"] == file_id
    assert MIN_INSIGHTS <= len(generated["insights"]) <= MAX_INSIGHTS

    current = client.get(f"/insights/{file_id}", headers=auth_headers(token)).json()["insights"]
    assert current["id"] == generated["id"]

    # Canonical record and index entry agree
    owner = generated["userId"]
    assert run(store.get(keys.file_key(file_id))) == run(store.get(keys.user_file_key(owner, file_id)))


def test_files_of_other_users_are_invisible(client):
    ann = signup_and_login(client, "ann@example.com")
    bob = signup_and_login(client, "bob@example.com")
    file_id = upload(client, ann).json()["fileId"]

    assert client.get("/files", headers=auth_headers(bob)).json() == {"files": []}

    for response in (
        client.get(f"/chart-data/{file_id}", headers=auth_headers(bob)),
        client.post("/insights", json={"fileId": file_id}, headers=auth_headers(bob)),
        client.get(f"/insights/{file_id}", headers=auth_headers(bob)),
    ):
        assert response.status_code == 404
        assert response.json() == {"error": "File not found or access denied"}

    missing = client.get("/chart-data/does-not-exist", headers=auth_headers(bob))
    assert missing.status_code == 404
    assert missing.json() == {"error": "File not found"}


def test_credentials_are_required(static_client):
    assert static_client.get("/files").status_code == 401
    assert static_client.get("/files", headers=auth_headers("forged")).status_code == 401
    assert static_client.get("/files", headers={"Authorization": "Basic abc"}).status_code == 401

    response = upload(static_client, "forged")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert "error" in response.json()


def test_upload_rejections(static_client, store, blobs):
    token = "token-a"

    response = upload(static_client, token, "notes.txt", b"hello", "text/plain")
    assert response.status_code == 400
    assert response.json() == {"error": "Please select a valid Excel file (.xls or .xlsx)"}

    response = upload(static_client, token, "huge.xlsx", b"\0" * (10 * 1024 * 1024 + 1))
    assert response.status_code == 400
    assert response.json() == {"error": "File size must be less than 10MB"}

    response = static_client.post("/upload", data={"other": "x"}, headers=auth_headers(token))
    assert response.status_code == 400
    assert response.json() == {"error": "No file provided"}

    assert len(store) == 0
    assert len(blobs) == 0
    assert static_client.get("/files", headers=auth_headers(token)).json() == {"files": []}


def test_upload_by_extension_with_generic_mime(static_client):
    response = upload(static_client, "token-a", "legacy.xls", b"data", "application/octet-stream")
    assert response.status_code == 200
    assert response.json()["fileName"] == "legacy.xls"


def test_insights_request_validation(static_client):
    response = static_client.post("/insights", json={}, headers=auth_headers("token-a"))
    assert response.status_code == 400
    assert "fileId" in response.json()["error"]

    response = static_client.get("/insights/unknown", headers=auth_headers("token-a"))
    assert response.status_code == 404


def test_current_insights_before_generation(static_client):
    file_id = upload(static_client, "token-a").json()["fileId"]
    response = static_client.get(f"/insights/{file_id}", headers=auth_headers("token-a"))
    assert response.status_code == 404
    assert response.json() == {"error": "No insights generated for this file yet"}


def test_signup_errors(client):
    signup_and_login(client, "ann@example.com")

    duplicate = client.post("/signup", json={"email": "ann@example.com", "password": PASSWORD, "name": "A"})
    assert duplicate.status_code == 400
    assert "already been registered" in duplicate.json()["error"]

    short = client.post("/signup", json={"email": "new@example.com", "password": "short", "name": "A"})
    assert short.status_code == 400
    assert short.json() == {"error": "Password must be at least 8 characters"}

    invalid = client.post("/signup", json={"email": "not-an-email", "password": PASSWORD, "name": "A"})
    assert invalid.status_code == 400

    wrong = client.post("/login", json={"email": "ann@example.com", "password": "nope-nope"})
    assert wrong.status_code == 401
    assert wrong.json() == {"error": "Incorrect email or password"}


def test_signup_requires_service_key_when_configured():
    settings = Settings(
        METADATA_STORE="memory",
        BLOB_BACKEND="memory",
        JWT_SECRET_KEY="test-secret",
        SIGNUP_SERVICE_KEY="service-secret",
        LOG_LEVEL="WARNING",
        _env_file=None,
    )
    services = build_services(settings, store=MemoryMetadataStore(), blobs=MemoryBlobStore())
    payload = {"email": "ann@example.com", "password": PASSWORD, "name": "Ann"}

    with TestClient(create_app(settings, services=services)) as client:
        assert client.post("/signup", json=payload).status_code == 401
        assert client.post("/signup", json=payload, headers=auth_headers("wrong")).status_code == 401

        response = client.post("/signup", json=payload, headers=auth_headers("service-secret"))
        assert response.status_code == 200


def test_store_failures_surface_as_internal_errors(test_settings, store, blobs, monkeypatch):
    from sheetlens.core.exceptions import MetadataStoreException

    async def broken_scan(prefix):
        raise MetadataStoreException("database is down")

    monkeypatch.setattr(store, "scan_prefix_items", broken_scan)
    services = build_services(test_settings, store=store, blobs=blobs)

    with TestClient(create_app(test_settings, services=services), raise_server_exceptions=False) as client:
        token = signup_and_login(client, "ann@example.com")
        response = client.get("/files", headers=auth_headers(token))

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_signup_uses_the_injected_password_rule():
    settings = Settings(
        METADATA_STORE="memory",
        BLOB_BACKEND="memory",
        JWT_SECRET_KEY="test-secret",
        PASSWORD_MIN_LENGTH=16,
        LOG_LEVEL="WARNING",
        _env_file=None,
    )
    services = build_services(settings, store=MemoryMetadataStore(), blobs=MemoryBlobStore())

    with TestClient(create_app(settings, services=services)) as client:
        short = client.post("/signup", json={"email": "ann@example.com", "password": "correct horse", "name": "A"})
        assert short.status_code == 400
        assert short.json() == {"error": "Password must be at least 16 characters"}

        long_enough = client.post(
            "/signup", json={"email": "ann@example.com", "password": "a much longer passphrase", "name": "A"}
        )
        assert long_enough.status_code == 200
