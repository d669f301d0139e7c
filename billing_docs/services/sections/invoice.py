"""청구서(invoice) PDF 섹션 렌더러.

헤더 -> 당사자 -> 항목 표 -> 합계 -> 결제 방법 -> 메모 순서로 그린다.
"""

from __future__ import annotations

from typing import List

from reportlab.lib.colors import Color

from billing_docs.documents.models import Invoice
from billing_docs.rendering.context import PageGeometry, RenderContext
from billing_docs.rendering.formatting import (
    PLACEHOLDER,
    format_currency,
    format_date,
    format_quantity,
    format_tax_rate,
    normalize_text,
)
from billing_docs.rendering.layout import (
    Column,
    InfoColumn,
    InfoLine,
    SummaryLine,
    draw_badge,
    draw_heading,
    draw_info_columns,
    draw_paragraph,
    draw_summary_block,
    draw_table,
)

INVOICE_GEOMETRY = PageGeometry(margin_top=48, margin_bottom=48, margin_x=48)
HEADER_HEIGHT = 95
LOGO_HEIGHT = 40

STATUS_LABELS = {
    "DRAFT": "Nháp",
    "SENT": "Đã gửi",
    "PARTIAL": "Thanh toán một phần",
    "OVERDUE": "Quá hạn",
    "PAID": "Đã thanh toán",
}
STATUS_COLORS = {
    "DRAFT": Color(0.4, 0.4, 0.4),
    "SENT": Color(0.12, 0.3, 0.6),
    "PARTIAL": Color(0.65, 0.42, 0.05),
    "OVERDUE": Color(0.75, 0.1, 0.1),
    "PAID": Color(0.12, 0.5, 0.2),
}
UNKNOWN_STATUS_COLOR = Color(0.2, 0.2, 0.2)

ITEM_COLUMNS = (
    Column("index", "#", 0.06, "center"),
    Column("description", "Mô tả", 0.42),
    Column("quantity", "Số lượng", 0.12, "right"),
    Column("unit_price", "Đơn giá", 0.16, "right"),
    Column("tax", "Thuế", 0.10, "right"),
    Column("amount", "Thành tiền", 0.14, "right"),
)

CASH = "CASH"


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status or "N/A")


def status_color(status: str) -> Color:
    return STATUS_COLORS.get(status, UNKNOWN_STATUS_COLOR)


def render_header(ctx: RenderContext, invoice: Invoice) -> None:
    top = ctx.cursor_y

    logo_drawn = False
    if ctx.logo is not None:
        logo_width, logo_height = ctx.logo.getSize()
        if logo_width and logo_height:
            width = logo_width / logo_height * LOGO_HEIGHT
            ctx.surface.draw_image(ctx.logo, ctx.left, top - LOGO_HEIGHT, width, LOGO_HEIGHT)
            logo_drawn = True
    if not logo_drawn:
        brand = ctx.brand_name or str(invoice.company.name)
        ctx.draw_text(brand, ctx.left, top - 16, font=ctx.fonts.bold, size=20, color=Color(0, 0, 0))

    ctx.draw_text("HOÁ ĐƠN", ctx.right, top - 4, font=ctx.fonts.bold, size=22, align="right")
    ctx.draw_text(f"Mã hoá đơn: {invoice.invoice_number}", ctx.right, top - 26, size=12, align="right")
    draw_badge(ctx, status_label(invoice.status), ctx.right, top - 36, status_color(invoice.status), align="right")

    ctx.cursor_y = top - HEADER_HEIGHT


def _company_column(invoice: Invoice) -> InfoColumn:
    company = invoice.company
    lines = [
        InfoLine(str(company.name)),
        InfoLine(str(company.address)),
        InfoLine(str(company.phone), label="Điện thoại"),
        InfoLine(str(company.email), label="Email"),
        InfoLine(str(company.tax_code), label="MST"),
        InfoLine(str(company.website), label="Website"),
    ]
    return InfoColumn("Thông tin công ty", lines)


def _customer_column(invoice: Invoice) -> InfoColumn:
    person = invoice.customer.person
    company = invoice.customer.company

    recipient = company.name or person.name or "Khách hàng"
    address = company.address or person.address
    phone = company.phone or person.phone
    email = company.email or person.email
    tax_code = company.tax_code or person.tax_code

    lines = [
        InfoLine(recipient),
        InfoLine(address),
        InfoLine(phone),
        InfoLine(email),
    ]
    if tax_code:
        lines.append(InfoLine(tax_code, label="MST"))
    return InfoColumn("Thông tin khách hàng", lines, align="right")


def render_parties(ctx: RenderContext, invoice: Invoice) -> None:
    draw_info_columns(ctx, _company_column(invoice), _customer_column(invoice))


def render_items(ctx: RenderContext, invoice: Invoice) -> None:
    heading = "Chi tiết sản phẩm/dịch vụ"
    draw_heading(ctx, heading, size=13)
    if not invoice.items:
        draw_paragraph(ctx, "Không có sản phẩm/dịch vụ nào trong hoá đơn này.", color=ctx.palette.muted)
        return

    rows = [
        [
            str(index),
            normalize_text(item.description),
            format_quantity(item.quantity),
            format_currency(item.unit_price, invoice.currency),
            format_tax_rate(item.tax_rate, item.tax_exempt),
            format_currency(item.amount, invoice.currency),
        ]
        for index, item in enumerate(invoice.items, start=1)
    ]
    draw_table(ctx, ITEM_COLUMNS, rows, carry_heading=f"{heading} (tiếp theo)")


def build_summary_lines(invoice: Invoice) -> List[SummaryLine]:
    """합계 줄. 부분 결제(PARTIAL, paid > 0)일 때만 기납부/잔액 줄을 추가한다.

    마지막 줄은 항상 굵게.
    """

    currency = invoice.currency
    lines = [
        SummaryLine("Tạm tính", format_currency(invoice.subtotal, currency)),
        SummaryLine("Thuế", format_currency(invoice.tax, currency)),
        SummaryLine("Tổng thanh toán", format_currency(invoice.total, currency), bold=True),
    ]
    if invoice.is_partial:
        lines.append(SummaryLine("Đã thanh toán", format_currency(invoice.paid, currency)))
        lines.append(SummaryLine("Còn lại", format_currency(invoice.balance, currency), bold=True))
    return lines


def render_totals(ctx: RenderContext, invoice: Invoice) -> None:
    draw_heading(ctx, "Tổng kết & thanh toán", size=13)
    side_lines = [
        f"Ngày phát hành: {format_date(invoice.issue_date)}",
        f"Ngày đến hạn: {format_date(invoice.due_date)}",
        f"Trạng thái: {status_label(invoice.status)}",
    ]
    draw_summary_block(ctx, build_summary_lines(invoice), side_lines=side_lines)


def payment_lines(invoice: Invoice) -> List[str]:
    if invoice.payment_method == CASH:
        return [
            "Hình thức thanh toán: Tiền mặt",
            "Vui lòng thanh toán trực tiếp tại văn phòng hoặc liên hệ phòng kế toán để được hỗ trợ xác nhận.",
            f"Mã hoá đơn: {invoice.invoice_number}",
        ]

    company = invoice.company
    return [
        "Hình thức thanh toán: Chuyển khoản ngân hàng",
        f"Ngân hàng: {normalize_text(company.bank_name.value)}",
        f"Chi nhánh: {normalize_text(company.bank_branch.value)}",
        f"Số tài khoản: {normalize_text(company.bank_account_number.value)}",
        f"Chủ tài khoản: {normalize_text(company.bank_account_name.value)}",
    ]


def render_payment_method(ctx: RenderContext, invoice: Invoice) -> None:
    draw_heading(ctx, "Hình thức thanh toán", size=13)
    for line in payment_lines(invoice):
        draw_paragraph(ctx, line, size=12, after=2)
    accounting_email = invoice.company.accounting_email.value
    if accounting_email:
        draw_paragraph(ctx, f"Email kế toán: {accounting_email}", size=12, after=2)


def render_notes(ctx: RenderContext, invoice: Invoice) -> None:
    if not invoice.notes:
        return
    ctx.move_down(10)
    draw_heading(ctx, "Ghi chú", size=13)
    draw_paragraph(ctx, normalize_text(invoice.notes, PLACEHOLDER), color=ctx.palette.muted)


SECTIONS = (
    render_header,
    render_parties,
    render_items,
    render_totals,
    render_payment_method,
    render_notes,
)


def render_invoice(ctx: RenderContext, invoice: Invoice) -> None:
    for section in SECTIONS:
        section(ctx, invoice)
