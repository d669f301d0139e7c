import logging
from typing import Callable

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from billing_docs.exceptions import DocumentError, InvalidArgument, NotFound
from billing_docs.logging_config import setup_logging
from billing_docs.services.document_service import GeneratedDocument, get_document_service

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Billing Documents API")

document_service = get_document_service()


def _render(
    generate: Callable[[str], GeneratedDocument],
    document_id: str,
    *,
    invalid_detail: str,
    missing_detail: str,
) -> GeneratedDocument:
    try:
        return generate(document_id)
    except InvalidArgument:
        raise HTTPException(status_code=400, detail=invalid_detail)
    except NotFound:
        raise HTTPException(status_code=404, detail=missing_detail)
    except DocumentError:
        logger.exception("PDF generation failed for %s", document_id)
        raise HTTPException(status_code=500, detail="Không thể tạo file PDF")


def _pdf_response(document: GeneratedDocument, filename: str) -> Response:
    return Response(
        content=document.pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/invoice/{invoice_id}/pdf")
def invoice_pdf(invoice_id: str):
    document = _render(
        document_service.generate_invoice_pdf,
        invoice_id,
        invalid_detail="ID hoá đơn không hợp lệ",
        missing_detail="Không tìm thấy hoá đơn",
    )
    return _pdf_response(document, f"{document.document_number}.pdf")


@app.get("/contract/{contract_id}/pdf")
def contract_pdf(contract_id: str):
    document = _render(
        document_service.generate_contract_pdf,
        contract_id,
        invalid_detail="ID hợp đồng không hợp lệ",
        missing_detail="Không tìm thấy hợp đồng",
    )
    return _pdf_response(document, f"contract-{document.document_number}.pdf")


@app.get("/orders/{order_id}/pdf")
def order_pdf(order_id: str):
    document = _render(
        document_service.generate_order_pdf,
        order_id,
        invalid_detail="ID đơn hàng không hợp lệ",
        missing_detail="Không tìm thấy đơn hàng",
    )
    return _pdf_response(document, f"order-{document.document_number}.pdf")
