from __future__ import annotations

from typing import List

from reportlab.lib.colors import Color

from billing_docs.documents.models import Order, OrderItem
from billing_docs.rendering.context import PageGeometry, RenderContext, rgb255
from billing_docs.rendering.formatting import PLACEHOLDER, format_currency, format_date, normalize_text
from billing_docs.rendering.layout import (
    Column,
    InfoColumn,
    InfoLine,
    draw_heading,
    draw_info_columns,
    draw_paragraph,
    draw_table,
    ensure_height,
)

ORDER_GEOMETRY = PageGeometry(margin_top=64, margin_bottom=64, margin_x=56)

COMPLETED_COLOR = rgb255(34, 139, 34)
CANCELLED_COLOR = rgb255(220, 38, 38)
PENDING_COLOR = rgb255(37, 99, 235)

SERVICE_LABELS = {
    "DOMAIN": "Tên miền",
    "HOSTING": "Gói Hosting",
    "VPS": "Gói VPS",
}

ITEM_COLUMNS = (
    Column("service", "Dịch vụ", 0.46),
    Column("quantity", "Số lượng", 0.16),
    Column("unit_price", "Đơn giá", 0.18),
    Column("subtotal", "Thành tiền", 0.20),
)


def status_color(status: str | None) -> Color:
    if status == "COMPLETED":
        return COMPLETED_COLOR
    if status == "CANCELLED":
        return CANCELLED_COLOR
    return PENDING_COLOR


def payment_status(status: str | None) -> str:
    return "PAID" if status == "COMPLETED" else "PENDING"


def service_description(item: OrderItem) -> str:
    label = SERVICE_LABELS.get(item.service_type, "Dịch vụ")
    if item.service_type == "DOMAIN" and item.domain_name:
        return f"{label}: {item.domain_name}"
    return f"{label}: {item.display_name}"


def render_heading(ctx: RenderContext, order: Order) -> None:
    draw_heading(ctx, "HÓA ĐƠN/ĐƠN HÀNG DỊCH VỤ", f"Mã đơn hàng: {order.order_number}", size=18)


def _order_column(order: Order) -> InfoColumn:
    return InfoColumn(
        "Thông tin đơn hàng",
        [
            InfoLine(normalize_text(order.status), label="Trạng thái đơn hàng", color=status_color(order.status)),
            InfoLine(payment_status(order.status), label="Trạng thái thanh toán"),
            InfoLine(normalize_text(order.payment_method), label="Phương thức thanh toán"),
            InfoLine(format_date(order.created_at), label="Ngày tạo"),
            InfoLine(format_date(order.updated_at), label="Cập nhật cuối"),
            InfoLine(format_currency(order.total_amount), label="Tổng tiền"),
        ],
    )


def _customer_column(order: Order) -> InfoColumn:
    company = order.customer.company
    person = order.customer.person

    if company.has_any():
        lines = [
            InfoLine(normalize_text(company.name, "Chưa có tên công ty")),
            InfoLine(f"Mã số thuế: {company.tax_code}" if company.tax_code else "Mã số thuế chưa cập nhật"),
            InfoLine(f"Email: {company.email}" if company.email else "Email chưa cập nhật"),
            InfoLine(f"Số điện thoại: {company.phone}" if company.phone else "Số điện thoại chưa cập nhật"),
            InfoLine(normalize_text(company.address, "Địa chỉ công ty chưa cập nhật")),
        ]
    else:
        lines = [
            InfoLine(normalize_text(person.name, "Chưa có tên khách hàng")),
            InfoLine(f"Email: {person.email}" if person.email else "Email chưa cập nhật"),
            InfoLine(f"Số điện thoại: {person.phone}" if person.phone else "Số điện thoại chưa cập nhật"),
            InfoLine(normalize_text(person.address, "Địa chỉ chưa cập nhật")),
        ]
    return InfoColumn("Thông tin khách hàng", lines)


def render_info(ctx: RenderContext, order: Order) -> None:
    draw_info_columns(ctx, _order_column(order), _customer_column(order))


def render_notes(ctx: RenderContext, order: Order) -> None:
    if not order.notes:
        return
    draw_heading(ctx, "Ghi chú của đơn hàng")
    draw_paragraph(ctx, normalize_text(order.notes, PLACEHOLDER), line_gap=6)
    ctx.move_down(10)


def item_rows(order: Order) -> List[List[str]]:
    return [
        [
            service_description(item),
            str(item.quantity),
            format_currency(item.price),
            format_currency(item.subtotal),
        ]
        for item in order.items
    ]


def render_items(ctx: RenderContext, order: Order) -> None:
    heading = "Danh sách dịch vụ đã đặt"
    draw_heading(ctx, heading)
    if not order.items:
        ensure_height(ctx, 40)
        ctx.draw_text("Không có dịch vụ nào trong đơn hàng này.", ctx.left, ctx.cursor_y, size=11, color=ctx.palette.muted)
        ctx.move_down(24)
        return
    draw_table(ctx, ITEM_COLUMNS, item_rows(order), padding=8, min_row_height=22, carry_heading=f"{heading} (tiếp theo)")


def render_footer(ctx: RenderContext, order: Order) -> None:
    if not order.assigned_user_name:
        return
    ensure_height(ctx, 80)
    ctx.move_down(28)
    staff = order.assigned_user_name
    if order.assigned_user_email:
        staff = f"{staff} ({order.assigned_user_email})"
    ctx.draw_text(f"Nhân viên phụ trách: {staff}", ctx.left, ctx.cursor_y, size=11, color=ctx.palette.muted)
    ctx.move_down(24)


SECTIONS = (
    render_heading,
    render_info,
    render_notes,
    render_items,
    render_footer,
)


def render_order(ctx: RenderContext, order: Order) -> None:
    for section in SECTIONS:
        section(ctx, order)
