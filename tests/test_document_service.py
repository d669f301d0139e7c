from io import BytesIO

import fitz
import pytest
from PIL import Image

from billing_docs.config import Settings
from billing_docs.exceptions import AssetLoadFailure, InvalidId, NotFound
from billing_docs.infra.assets import InMemoryAssetProvider
from billing_docs.services.document_service import DocumentService


def _service(repository, assets) -> DocumentService:
    return DocumentService(repository, assets, Settings(brand_name="CRM Portal", site_url="https://crm.example.vn"))


def _page_count(pdf: bytes) -> int:
    with fitz.open(stream=pdf, filetype="pdf") as doc:
        return doc.page_count


def _png() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (120, 40), "white").save(buffer, "PNG")
    return buffer.getvalue()


def test_generate_invoice_pdf(repository, assets) -> None:
    result = _service(repository, assets).generate_invoice_pdf("1")

    assert result.pdf_buffer.startswith(b"%PDF")
    assert result.document_number == "INV-2024-001"
    assert result.page_count == _page_count(result.pdf_buffer) == 1


def test_generate_contract_and_order_pdf(repository, assets) -> None:
    service = _service(repository, assets)

    contract = service.generate_contract_pdf(1)
    order = service.generate_order_pdf(5)

    assert contract.pdf_buffer.startswith(b"%PDF")
    assert contract.document_number == "HD-2024-07"
    assert contract.page_count == _page_count(contract.pdf_buffer)
    assert order.pdf_buffer.startswith(b"%PDF")
    assert order.document_number == "ORD-5"


def test_identical_input_gives_identical_bytes(repository, assets) -> None:
    service = _service(repository, assets)

    first = service.generate_invoice_pdf(1)
    second = service.generate_invoice_pdf(1)

    assert first.pdf_buffer == second.pdf_buffer


def test_long_invoice_page_count_matches_pdf(repository, assets) -> None:
    repository.invoice_items[1] = [
        {"id": index, "description": "Gói dịch vụ mở rộng " * 15, "quantity": 2, "unit_price": 250000, "tax_rate": 8, "tax_label": None}
        for index in range(60)
    ]

    result = _service(repository, assets).generate_invoice_pdf(1)

    assert result.page_count > 1
    assert _page_count(result.pdf_buffer) == result.page_count


def test_errors_from_assembly_propagate(repository, assets) -> None:
    service = _service(repository, assets)

    with pytest.raises(NotFound):
        service.generate_invoice_pdf(99)
    with pytest.raises(InvalidId):
        service.generate_order_pdf("abc")


def test_unparseable_font_is_fatal(repository, font_bytes) -> None:
    regular, _bold = font_bytes
    assets = InMemoryAssetProvider(regular, b"definitely not a font")

    with pytest.raises(AssetLoadFailure):
        _service(repository, assets).generate_contract_pdf(1)


def test_corrupt_logo_falls_back_to_text(repository, font_bytes, caplog) -> None:
    regular, bold = font_bytes
    broken = InMemoryAssetProvider(regular, bold, logo=b"\x89PNG broken")

    result = _service(repository, broken).generate_invoice_pdf(1)

    assert result.pdf_buffer.startswith(b"%PDF")
    assert "Logo image could not be decoded" in caplog.text


def test_logo_is_embedded(repository, font_bytes) -> None:
    regular, bold = font_bytes
    with_logo = InMemoryAssetProvider(regular, bold, logo=_png())

    result = _service(repository, with_logo).generate_invoice_pdf(1)

    with fitz.open(stream=result.pdf_buffer, filetype="pdf") as doc:
        assert len(doc[0].get_images()) == 1
