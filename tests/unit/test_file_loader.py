from pathlib import Path

import pytest

from voucher_verifier.extraction.file_loader import FileLoader


class TestFileLoader:
    def test_reads_pdf_with_declared_metadata(self, tmp_path: Path) -> None:
        path = tmp_path / "vale.pdf"
        path.write_bytes(b"%PDF test content")

        document = FileLoader().load(path)

        assert document.content == b"%PDF test content"
        assert document.declared_size == len(b"%PDF test content")
        assert document.media_type == "application/pdf"
        assert document.file_name == "vale.pdf"

    def test_unknown_extension_gets_generic_media_type(self, tmp_path: Path) -> None:
        path = tmp_path / "vale.unknownext"
        path.write_bytes(b"data")

        document = FileLoader().load(path)

        assert document.media_type == FileLoader.DEFAULT_MEDIA_TYPE

    def test_raises_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="missing"):
            FileLoader().load(tmp_path / "missing.pdf")

    def test_directory_is_not_a_document(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            FileLoader().load(tmp_path)
