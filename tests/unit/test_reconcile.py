from sheetlens.auth.base import Principal
from sheetlens.services.container import build_services
from sheetlens.services.reconcile import reconcile_ownership_index
from sheetlens.store import keys
from sheetlens.store.memory import MemoryMetadataStore
from tests.conftest import XLSX_TYPE, run

ALICE = Principal(user_id="user-a")
BOB = Principal(user_id="user-b")


def test_consistent_store_is_left_alone(services, store):
    run(services.ingestion.ingest(ALICE, b"1", "a.xlsx", XLSX_TYPE))
    run(services.ingestion.ingest(BOB, b"2", "b.xlsx", XLSX_TYPE))

    report = run(reconcile_ownership_index(store))

    assert report.as_dict() == {"checked": 2, "repaired": 0, "removed": 0, "skipped": 0}


def test_missing_and_stale_entries_are_rebuilt(services, store):
    missing = run(services.ingestion.ingest(ALICE, b"1", "a.xlsx", XLSX_TYPE))
    stale = run(services.ingestion.ingest(ALICE, b"2", "b.xlsx", XLSX_TYPE))
    run(store.delete(keys.user_file_key("user-a", missing.id)))
    run(store.put(keys.user_file_key("user-a", stale.id), {"id": stale.id, "userId": "user-a"}))

    report = run(reconcile_ownership_index(store))

    assert report.repaired == 2
    assert run(store.get(keys.user_file_key("user-a", missing.id))) == missing.to_store()
    assert run(store.get(keys.user_file_key("user-a", stale.id))) == stale.to_store()


def test_dangling_and_wrong_owner_entries_are_removed(services, store):
    file = run(services.ingestion.ingest(ALICE, b"1", "a.xlsx", XLSX_TYPE))
    run(store.put(keys.user_file_key("user-b", file.id), file.to_store()))
    run(store.put(keys.user_file_key("user-a", "ghost"), {"id": "ghost"}))

    report = run(reconcile_ownership_index(store))

    assert report.removed == 2
    assert run(store.get(keys.user_file_key("user-b", file.id))) is None
    assert run(store.get(keys.user_file_key("user-a", "ghost"))) is None
    assert [f.id for f in run(services.ingestion.list_files(ALICE))] == [file.id]
    assert run(services.ingestion.list_files(BOB)) == []


class UploadDuringScanStore(MemoryMetadataStore):
    """Runs an upload right after the first scan of canonical records returns."""

    def __init__(self):
        super().__init__()
        self.upload = None
        self.uploaded = None

    async def scan_prefix_items(self, prefix):
        items = await super().scan_prefix_items(prefix)
        if prefix == keys.build_prefix(keys.FILE) and self.upload is not None:
            upload, self.upload = self.upload, None
            self.uploaded = await upload()
        return items


def test_upload_racing_the_job_keeps_its_index_entry(test_settings, blobs):
    store = UploadDuringScanStore()
    services = build_services(test_settings, store=store, blobs=blobs)
    store.upload = lambda: services.ingestion.ingest(ALICE, b"1", "late.xlsx", XLSX_TYPE)

    report = run(reconcile_ownership_index(store))

    assert report.removed == 0
    assert [f.id for f in run(services.ingestion.list_files(ALICE))] == [store.uploaded.id]


def test_records_with_unusable_owner_are_skipped(services, store):
    file = run(services.ingestion.ingest(ALICE, b"1", "a.xlsx", XLSX_TYPE))
    broken = dict(file.to_store(), id="broken", userId="team:a")
    run(store.put(keys.file_key("broken"), broken))
    run(store.put(keys.file_key("empty"), {"id": "empty"}))

    report = run(reconcile_ownership_index(store))

    assert report.as_dict() == {"checked": 1, "repaired": 0, "removed": 0, "skipped": 2}
    assert [f.id for f in run(services.ingestion.list_files(ALICE))] == [file.id]
