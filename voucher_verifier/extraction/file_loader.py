import mimetypes
from pathlib import Path

from voucher_verifier.extraction.models import Document


class FileLoader:
    """Reads a voucher document from disk into a Document."""

    DEFAULT_MEDIA_TYPE = "application/octet-stream"

    def load(self, path: Path) -> Document:
        """Read file bytes and declare size and media type from the file itself.

        Raises:
            FileNotFoundError: if nothing exists at ``path``.
        """
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        media_type, _encoding = mimetypes.guess_type(path.name)
        return Document(
            content=path.read_bytes(),
            declared_size=path.stat().st_size,
            media_type=media_type or self.DEFAULT_MEDIA_TYPE,
            file_name=path.name,
        )
