import pytest

from tests.pdf_builders import build_pdf


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Single page voucher with a labeled code in its text layer."""
    return build_pdf([(["VALE DE MATERIAL", "FOLIO CP-143-00001", "Obra: Norte"], None)])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    return build_pdf([(["Page one content"], None), (["Page two content"], None)])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """A valid PDF with a blank page: no text, no QR."""
    return build_pdf([([], None)])


@pytest.fixture()
def qr_only_pdf_bytes() -> bytes:
    """No text layer, QR on page one pointing at the voucher URL."""
    return build_pdf([([], "https://host/vale/RT-001-00099")])


@pytest.fixture()
def text_and_qr_pdf_bytes() -> bytes:
    """Text says CP-143-00001 while the QR encodes a different code."""
    return build_pdf([(["FOLIO CP-143-00001"], "https://host/vale/RT-001-00099")])
