import pytest
from pydantic import ValidationError

from voucher_verifier.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_document_limit_is_five_megabytes(self) -> None:
        s = Settings()
        assert s.max_document_size_bytes == 5 * 1024 * 1024

    def test_default_accepted_media_type(self) -> None:
        s = Settings()
        assert s.accepted_media_type == "application/pdf"

    def test_default_raster_scale(self) -> None:
        s = Settings()
        assert s.raster_scale == 2.0

    def test_default_visual_code_path_fragment(self) -> None:
        s = Settings()
        assert s.visual_code_path_fragment == "vale/"

    def test_default_audit_action_kind(self) -> None:
        s = Settings()
        assert s.audit_action_kind == "verification"


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        s = Settings()
        assert s.app_env == "production"

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_pdf_engine(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PDF_ENGINE", "pymupdf")
        s = Settings()
        assert s.pdf_engine == "pymupdf"

    def test_loads_batch_workers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BATCH_WORKERS", "8")
        s = Settings()
        assert s.batch_workers == 8


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_non_positive_document_limit_raises(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MAX_DOCUMENT_SIZE_BYTES", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_non_positive_raster_scale_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RASTER_SCALE", "-1")
        with pytest.raises(ValidationError):
            Settings()

    def test_zero_batch_workers_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BATCH_WORKERS", "0")
        with pytest.raises(ValidationError):
            Settings()
