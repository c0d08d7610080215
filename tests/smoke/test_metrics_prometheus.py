import uuid

from fastapi.testclient import TestClient

from sheetlens.main import app
from sheetlens.observability.metrics import get_counter, inc_counter, observe_ms, render_prometheus_metrics
from tests.conftest import XLSX_TYPE, auth_headers


def test_prometheus_render_contains_counter_and_timer():
    suffix = uuid.uuid4().hex[:8]
    counter_name = f"test_counter_{suffix}"
    timer_name = f"test_timer_{suffix}"

    inc_counter(counter_name, endpoint="/test")
    inc_counter(counter_name, endpoint="/test")
    observe_ms(timer_name, 12.5, endpoint="/test")

    body = render_prometheus_metrics()
    assert f"# TYPE {counter_name} counter" in body
    assert f'{counter_name}{{endpoint="/test"}} 2' in body
    assert f"# TYPE {timer_name}_count counter" in body
    assert f'{timer_name}_sum{{endpoint="/test"}} 12.5' in body
    assert get_counter(counter_name, endpoint="/test") == 2


def test_label_values_are_escaped():
    name = f"test_escape_{uuid.uuid4().hex[:8]}"
    inc_counter(name, reason='say "hi"')
    assert f'{name}{{reason="say \\"hi\\""}} 1' in render_prometheus_metrics()


def test_metrics_endpoint_exposed():
    with TestClient(app) as client:
        client.get("/health")
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "text/plain" in response.headers.get("content-type", "")
        assert "http_requests_total" in response.text


def test_upload_counters(static_client):
    uploaded_before = get_counter("files_uploaded_total")
    rejected_before = get_counter("upload_rejected_total", reason="type")

    static_client.post(
        "/upload",
        files={"file": ("sales.xlsx", b"data", XLSX_TYPE)},
        headers=auth_headers("token-a"),
    )
    static_client.post(
        "/upload",
        files={"file": ("notes.txt", b"data", "text/plain")},
        headers=auth_headers("token-a"),
    )

    assert get_counter("files_uploaded_total") == uploaded_before + 1
    assert get_counter("upload_rejected_total", reason="type") == rejected_before + 1
    assert 'upload_rejected_total{reason="type"}' in static_client.get("/metrics").text
