from dataclasses import dataclass
from enum import StrEnum


class ExtractionMethod(StrEnum):
    STRUCTURED_TEXT = "structured-text"
    VISUAL_CODE = "visual-code"


@dataclass(frozen=True)
class Document:
    """An uploaded voucher document. Lives for one pipeline invocation only."""

    content: bytes
    declared_size: int
    media_type: str
    file_name: str = ""

    @classmethod
    def from_bytes(
        cls,
        content: bytes,
        media_type: str = "application/pdf",
        file_name: str = "",
    ) -> "Document":
        return cls(
            content=content,
            declared_size=len(content),
            media_type=media_type,
            file_name=file_name,
        )


@dataclass(frozen=True)
class ExtractionResult:
    """A voucher code recovered from a document and how it was found."""

    code: str
    method: ExtractionMethod

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "method": self.method.value}
