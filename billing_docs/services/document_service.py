from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from billing_docs.config import Settings, settings
from billing_docs.documents.assembler import (
    CompanyDefaults,
    assemble_contract,
    assemble_invoice,
    assemble_order,
)
from billing_docs.infra.assets import AssetProvider, get_asset_provider
from billing_docs.infra.document_repository import DocumentRepository, PostgresDocumentRepository
from billing_docs.infra.pdf_generator import PDFGenerator
from billing_docs.rendering.context import CONTRACT_PALETTE, INVOICE_PALETTE, ORDER_PALETTE
from billing_docs.services.sections.contract import CONTRACT_GEOMETRY, render_contract
from billing_docs.services.sections.invoice import INVOICE_GEOMETRY, render_invoice
from billing_docs.services.sections.order import ORDER_GEOMETRY, render_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedDocument:
    pdf_buffer: bytes
    document_number: str
    page_count: int


class DocumentService:
    """청구서/계약서/주문서 PDF 생성 서비스.

    레코드 조회 -> 뷰 모델 조립 -> 섹션 렌더링 -> 바이트 반환.
    호출 간에 공유하는 가변 상태는 없다.
    """

    def __init__(
        self,
        repository: DocumentRepository,
        assets: AssetProvider,
        app_settings: Optional[Settings] = None,
    ) -> None:
        self._repository = repository
        self._settings = app_settings or settings
        self._defaults = CompanyDefaults.from_settings(self._settings)
        self._generator = PDFGenerator(assets)

    def generate_invoice_pdf(self, invoice_id: Any) -> GeneratedDocument:
        invoice = assemble_invoice(self._repository, invoice_id, self._defaults)
        pdf, pages = self._generator.generate(
            lambda ctx: render_invoice(ctx, invoice),
            geometry=INVOICE_GEOMETRY,
            palette=INVOICE_PALETTE,
            title=f"Hoá đơn {invoice.invoice_number}",
            brand_name=self._settings.brand_name,
        )
        logger.info("Generated invoice %s (%d pages, %d bytes)", invoice.invoice_number, pages, len(pdf))
        return GeneratedDocument(pdf, invoice.invoice_number, pages)

    def generate_contract_pdf(self, contract_id: Any) -> GeneratedDocument:
        contract = assemble_contract(self._repository, contract_id, self._defaults)
        pdf, pages = self._generator.generate(
            lambda ctx: render_contract(ctx, contract),
            geometry=CONTRACT_GEOMETRY,
            palette=CONTRACT_PALETTE,
            title=f"Hợp đồng {contract.document_number}",
            brand_name=self._settings.brand_name,
        )
        logger.info("Generated contract %s (%d pages, %d bytes)", contract.document_number, pages, len(pdf))
        return GeneratedDocument(pdf, contract.document_number, pages)

    def generate_order_pdf(self, order_id: Any) -> GeneratedDocument:
        order = assemble_order(self._repository, order_id)
        pdf, pages = self._generator.generate(
            lambda ctx: render_order(ctx, order),
            geometry=ORDER_GEOMETRY,
            palette=ORDER_PALETTE,
            title=f"Đơn hàng {order.order_number}",
            brand_name=self._settings.brand_name,
        )
        logger.info("Generated order %s (%d pages, %d bytes)", order.order_number, pages, len(pdf))
        return GeneratedDocument(pdf, order.order_number, pages)


_default_service: Optional[DocumentService] = None


def get_document_service() -> DocumentService:
    """설정 기반 기본 DocumentService (Postgres + 로컬 에셋) 를 반환한다."""

    global _default_service
    if _default_service is None:
        _default_service = DocumentService(
            repository=PostgresDocumentRepository(settings.db_url),
            assets=get_asset_provider(),
            app_settings=settings,
        )
    return _default_service


def generate_invoice_pdf(invoice_id: Any) -> GeneratedDocument:
    return get_document_service().generate_invoice_pdf(invoice_id)


def generate_contract_pdf(contract_id: Any) -> GeneratedDocument:
    return get_document_service().generate_contract_pdf(contract_id)


def generate_order_pdf(order_id: Any) -> GeneratedDocument:
    return get_document_service().generate_order_pdf(order_id)
