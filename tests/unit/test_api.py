# ============================================================================
# FILE: tests/unit/test_api.py
# ============================================================================
"""
Unit tests for the FastAPI backend (parser is faked)
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from api import main
from lab_ingestion.core.context import ExtractionResult
from lab_ingestion.utils.exceptions import AssetDownloadError


class FakeParser:
    def __init__(self):
        self.calls = []

    async def parse(self, pdf_bytes, label=None, cancel_event=None):
        self.calls.append((pdf_bytes, label))
        result = ExtractionResult(report_date=date(2024, 3, 12), source="ocr", label=label)
        result.accept("glucose", 5.5)
        result.add_pending("Витамин D")
        return result


@pytest.fixture
def fake_parser(monkeypatch):
    parser = FakeParser()
    monkeypatch.setattr(main.app.state, "parser", parser, raising=False)
    return parser


def test_health():
    """Test health check endpoint"""
    client = TestClient(main.app)
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_import_pdf(fake_parser):
    """Test upload returns the extraction result"""
    client = TestClient(main.app)
    response = client.post(
        "/api/analyses/import-pdf",
        files={"file": ("report.pdf", b"%PDF-1.4 data", "application/pdf")},
        data={"label": "April checkup"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "reportDate": "2024-03-12",
        "values": {"glucose": 5.5},
        "unrecognizedItems": ["Витамин D: Выполняется"],
        "source": "ocr",
        "label": "April checkup",
    }
    assert fake_parser.calls == [(b"%PDF-1.4 data", "April checkup")]


def test_import_pdf_without_label(fake_parser):
    """Test label is optional"""
    client = TestClient(main.app)
    response = client.post(
        "/api/analyses/import-pdf",
        files={"file": ("report.pdf", b"%PDF-1.4 data", "application/pdf")},
    )

    assert response.status_code == 200
    assert response.json()["label"] is None


def test_import_empty_file(fake_parser):
    """Test empty uploads are rejected"""
    client = TestClient(main.app)
    response = client.post(
        "/api/analyses/import-pdf",
        files={"file": ("report.pdf", b"", "application/pdf")},
    )

    assert response.status_code == 400
    assert fake_parser.calls == []


def test_startup_survives_offline_tessdata(monkeypatch):
    """Test language data pre-load failure does not stop the service"""
    class OfflineTessdata:
        async def ensure_languages(self):
            raise AssetDownloadError("offline")

    class StartupParser(FakeParser):
        def __init__(self):
            super().__init__()
            self.tessdata = OfflineTessdata()

    monkeypatch.setattr(main, "LabReportParser", StartupParser)
    # restored after the test; lifespan replaces it
    monkeypatch.setattr(main.app.state, "parser", None, raising=False)

    with TestClient(main.app) as client:
        assert isinstance(main.app.state.parser, StartupParser)
        assert client.get("/api/health").status_code == 200
