"""
Unit tests for the language data download script
"""

from scripts import download_tessdata


def test_list_languages(tmp_path):
    """Test --list reports without downloading"""
    (tmp_path / "rus.traineddata").write_bytes(b"model")

    assert download_tessdata.main(["--list", "--dir", str(tmp_path), "--languages", "rus+eng"]) == 0


def test_download_failure_exit_code(tmp_path, monkeypatch):
    """Test a failed download exits non-zero"""
    async def failing_ensure(self, force=False):
        from lab_ingestion.utils.exceptions import AssetDownloadError
        raise AssetDownloadError("offline", asset="rus")

    monkeypatch.setattr(download_tessdata.TessdataManager, "ensure_languages", failing_ensure)

    assert download_tessdata.main(["--dir", str(tmp_path), "--languages", "rus"]) == 1


def test_nothing_to_download(tmp_path):
    """Test a complete cache exits zero"""
    (tmp_path / "rus.traineddata").write_bytes(b"model")

    assert download_tessdata.main(["--dir", str(tmp_path), "--languages", "rus"]) == 0
