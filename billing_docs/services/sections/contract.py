from __future__ import annotations

from typing import Any, Optional, Sequence

from reportlab.lib.colors import Color

from billing_docs.documents.models import Contract, DomainAttachment, HostingAttachment, VpsAttachment
from billing_docs.rendering.context import PageGeometry, RenderContext, rgb255
from billing_docs.rendering.formatting import (
    NOT_AVAILABLE,
    PLACEHOLDER,
    format_badge,
    format_currency,
    format_date,
)
from billing_docs.rendering.layout import (
    ServiceCard,
    draw_heading,
    draw_info_card,
    draw_paragraph,
    draw_section_heading,
    draw_service_card,
    draw_signature_block,
)

CONTRACT_GEOMETRY = PageGeometry(margin_top=72, margin_bottom=72, margin_x=56)

DOMAIN_ACCENT = rgb255(82, 136, 248)
HOSTING_ACCENT = rgb255(37, 188, 134)
VPS_ACCENT = rgb255(128, 90, 213)

CONTINUED = "(tiếp theo)"


def _or_na(value: Any) -> str:
    return NOT_AVAILABLE if value is None else str(value)


def _gb(value: Optional[int]) -> str:
    return f"{value} GB" if value else NOT_AVAILABLE


def _staff(contract: Contract) -> str:
    if not contract.assigned_user_name:
        return PLACEHOLDER
    if contract.assigned_user_email:
        return f"{contract.assigned_user_name} ({contract.assigned_user_email})"
    return contract.assigned_user_name


def render_title(ctx: RenderContext, contract: Contract) -> None:
    draw_heading(
        ctx,
        "HỢP ĐỒNG CUNG CẤP DỊCH VỤ",
        f"{ctx.brand_name or contract.company.name} • {contract.contract_number or f'HD-{contract.id}'}",
        size=18,
    )


def render_summary_card(ctx: RenderContext, contract: Contract) -> None:
    rows = [
        ("MÃ HỢP ĐỒNG", contract.contract_number or f"HD-{contract.id}"),
        ("Bên cung cấp", str(contract.company.name)),
        ("Liên hệ bên cung cấp", f"{contract.company.phone} • {contract.company.email}"),
        ("Ngày tạo", format_date(contract.created_at)),
        ("Ngày hiệu lực", f"{format_date(contract.start_date)} - {format_date(contract.end_date)}"),
        ("Giá trị hợp đồng", format_currency(contract.total_value)),
        ("Trạng thái hợp đồng", _or_na(contract.status)),
        ("Trạng thái đơn hàng", _or_na(contract.order_status)),
    ]
    if contract.order_number:
        rows.append(("Mã đơn hàng", contract.order_number))
    draw_info_card(ctx, "1. Thông tin hợp đồng", rows)


def render_company_card(ctx: RenderContext, contract: Contract) -> None:
    company = contract.customer.company
    draw_info_card(
        ctx,
        "2. Thông tin công ty",
        [
            ("Tên công ty", company.name or PLACEHOLDER),
            ("Mã số thuế", company.tax_code or PLACEHOLDER),
            ("Email", company.email or PLACEHOLDER),
            ("Điện thoại", company.phone or PLACEHOLDER),
            ("Địa chỉ", company.address or PLACEHOLDER),
        ],
    )


def render_customer_card(ctx: RenderContext, contract: Contract) -> None:
    person = contract.customer.person
    draw_info_card(
        ctx,
        "3. Thông tin khách hàng",
        [
            ("Khách hàng", person.name or PLACEHOLDER),
            ("Email", person.email or PLACEHOLDER),
            ("Số điện thoại", person.phone or PLACEHOLDER),
            ("Mã số thuế cá nhân", person.tax_code or PLACEHOLDER),
            ("Địa chỉ", person.address or PLACEHOLDER),
            ("Nhân viên phụ trách", _staff(contract)),
        ],
    )


def domain_card(item: DomainAttachment) -> ServiceCard:
    return ServiceCard(
        title=item.domain_name,
        tag=format_badge(item.status),
        lines=[
            f"Registrar: {_or_na(item.registrar)}",
            f"Hiệu lực: {format_date(item.registration_date)} - {format_date(item.expiry_date)}",
            f"Giá: {format_currency(item.price)}",
        ],
    )


def hosting_card(item: HostingAttachment) -> ServiceCard:
    lines = [
        f"Cấu hình: {_gb(item.storage)} lưu trữ • {_gb(item.bandwidth)} băng thông",
        f"Ngày hết hạn: {format_date(item.expiry_date)}",
        f"Giá: {format_currency(item.price)}",
    ]
    if item.server_location:
        lines.insert(1, f"Vị trí máy chủ: {item.server_location}")
    return ServiceCard(title=item.plan_name, tag=format_badge(item.status), lines=lines)


def vps_card(item: VpsAttachment) -> ServiceCard:
    return ServiceCard(
        title=item.plan_name,
        tag=format_badge(item.status),
        lines=[
            f"CPU {_or_na(item.cpu)} • RAM {_or_na(item.ram)} GB • Storage {_or_na(item.storage)} GB"
            f" • Băng thông {_or_na(item.bandwidth)} GB",
            f"OS: {_or_na(item.os)} • IP: {_or_na(item.ip_address)}",
            f"Ngày hết hạn: {format_date(item.expiry_date)}",
            f"Giá: {format_currency(item.price)}",
        ],
    )


def render_service_section(
    ctx: RenderContext,
    heading: str,
    cards: Sequence[ServiceCard],
    *,
    accent: Color,
    empty_message: str,
) -> None:
    """서비스 섹션. 카드가 없으면 안내 문구 한 줄만 그린다."""

    draw_section_heading(ctx, heading)
    if not cards:
        draw_paragraph(ctx, empty_message, color=ctx.palette.muted)
        return
    for card in cards:
        draw_service_card(ctx, card, accent=accent, carry_heading=f"{heading} {CONTINUED}")


def render_services(ctx: RenderContext, contract: Contract) -> None:
    render_service_section(
        ctx,
        "4. Tên miền đã đăng ký",
        [domain_card(item) for item in contract.domains],
        accent=DOMAIN_ACCENT,
        empty_message="Không có tên miền nào thuộc hợp đồng này.",
    )
    render_service_section(
        ctx,
        "5. Hosting",
        [hosting_card(item) for item in contract.hostings],
        accent=HOSTING_ACCENT,
        empty_message="Không có gói hosting nào thuộc hợp đồng này.",
    )
    render_service_section(
        ctx,
        "6. VPS",
        [vps_card(item) for item in contract.vpss],
        accent=VPS_ACCENT,
        empty_message="Không có gói VPS nào thuộc hợp đồng này.",
    )


def render_signatures(ctx: RenderContext, contract: Contract) -> None:
    draw_section_heading(ctx, "7. Chữ ký xác nhận")
    draw_signature_block(ctx)


SECTIONS = (
    render_title,
    render_summary_card,
    render_company_card,
    render_customer_card,
    render_services,
    render_signatures,
)


def render_contract(ctx: RenderContext, contract: Contract) -> None:
    for section in SECTIONS:
        section(ctx, contract)
