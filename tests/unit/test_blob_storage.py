import asyncio
import json

import httpx
import pytest

from sheetlens.storage.local import LocalBlobStore
from sheetlens.storage.memory import MemoryBlobStore
from sheetlens.storage.supabase import SupabaseBlobStore
from tests.conftest import XLSX_TYPE, run

SUPABASE_URL = "https://project.supabase.test"


@pytest.fixture(params=["memory", "local"])
def blob_store(request, tmp_path):
    if request.param == "memory":
        return MemoryBlobStore()
    return LocalBlobStore(tmp_path / "uploads")


def test_write_read_delete(blob_store):
    path = "user-a/f1_sales.xlsx"

    info = run(blob_store.write(path, b"PK\x03\x04", XLSX_TYPE))
    assert info.path == path
    assert info.size_bytes == 4
    assert run(blob_store.exists(path))
    assert run(blob_store.read(path)) == b"PK\x03\x04"

    assert run(blob_store.delete(path)) is True
    assert run(blob_store.delete(path)) is False
    assert not run(blob_store.exists(path))


def test_missing_blob_raises_file_not_found(blob_store):
    with pytest.raises(FileNotFoundError):
        run(blob_store.read("user-a/nothing.xlsx"))


def test_local_store_keeps_owner_directories(tmp_path):
    store = LocalBlobStore(tmp_path)
    run(store.write("user-a/f1_sales.xlsx", b"data"))
    assert (tmp_path / "user-a" / "f1_sales.xlsx").read_bytes() == b"data"


def test_local_store_refuses_paths_outside_base(tmp_path):
    store = LocalBlobStore(tmp_path / "uploads")
    with pytest.raises(ValueError):
        run(store.write("../escape.xlsx", b"data"))
    assert not (tmp_path / "escape.xlsx").exists()


def test_supabase_store_creates_missing_bucket_once():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path))
        if request.url.path == "/storage/v1/bucket" and request.method == "GET":
            return httpx.Response(200, json=[{"name": "other"}])
        if request.url.path == "/storage/v1/bucket" and request.method == "POST":
            assert json.loads(request.content)["public"] is False
            return httpx.Response(200, json={"name": "files"})
        if request.method == "POST":
            assert request.headers["x-upsert"] == "false"
            return httpx.Response(200, json={"Key": "files/x"})
        if request.method == "GET":
            return httpx.Response(200, content=b"stored")
        return httpx.Response(404)

    client = httpx.AsyncClient(base_url=SUPABASE_URL, transport=httpx.MockTransport(handler))
    store = SupabaseBlobStore(SUPABASE_URL, "service-key", "files", client=client)

    async def flow():
        await store.write("user-a/f1_sales.xlsx", b"one", XLSX_TYPE)
        await store.write("user-a/f2_sales.xlsx", b"two", XLSX_TYPE)
        content = await store.read("user-a/f1_sales.xlsx")
        await store.close()
        return content

    assert asyncio.run(flow()) == b"stored"
    assert calls.count(("GET", "/storage/v1/bucket")) == 1
    assert calls.count(("POST", "/storage/v1/bucket")) == 1
    assert ("POST", "/storage/v1/object/files/user-a/f1_sales.xlsx") in calls


def test_supabase_missing_object_raises_file_not_found():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "not_found"})

    client = httpx.AsyncClient(base_url=SUPABASE_URL, transport=httpx.MockTransport(handler))
    store = SupabaseBlobStore(SUPABASE_URL, "service-key", "files", client=client)

    async def flow():
        with pytest.raises(FileNotFoundError):
            await store.read("user-a/gone.xlsx")
        await store.close()

    asyncio.run(flow())
