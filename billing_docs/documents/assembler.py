from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from billing_docs.documents.models import (
    INVOICE_STATUSES,
    TAX_EXEMPT_LABEL,
    CompanyProfile,
    Contract,
    Counterparty,
    DomainAttachment,
    HostingAttachment,
    Invoice,
    InvoiceItem,
    Order,
    OrderItem,
    PartyInfo,
    ProfileValue,
    VpsAttachment,
    unresolved_label,
)
from billing_docs.exceptions import InvalidId, NotFound
from billing_docs.infra.document_repository import DocumentRepository, Row
from billing_docs.rendering.formatting import to_date, to_decimal

logger = logging.getLogger(__name__)

MONEY_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class CompanyDefaults:
    """회사 설정이 없거나 비어 있을 때 필드 단위로 쓰는 기본 프로필."""

    name: str
    address: str = "123 Business Avenue, Hà Nội"
    phone: str = "0123 456 789"
    email: str = "contact@example.com"
    tax_code: str = "0100000000"
    bank_name: str = ""
    bank_account_number: str = ""
    bank_account_name: str = ""
    bank_branch: str = ""
    accounting_email: str = ""
    website: str = "https://example.com"
    settings_key: str = "general"
    currency: str = "VND"

    @classmethod
    def from_settings(cls, app_settings: Any) -> "CompanyDefaults":
        return cls(
            name=app_settings.brand_name,
            bank_account_name=app_settings.brand_name,
            website=app_settings.site_url,
            settings_key=app_settings.settings_key,
            currency=app_settings.default_currency,
        )

    def for_contracts(self) -> "CompanyDefaults":
        """계약서용 기본값. 이름/은행/웹사이트는 같고 연락처만 다르다."""

        return replace(
            self,
            address="123 Nguyễn Huệ, Q1, TP.HCM",
            phone="1900 1234",
            email="support@crmportal.com",
            tax_code="",
        )


class GeneralSettingsPayload(BaseModel):
    """settings 테이블의 general 값(JSON). 문자열이 아닌 값은 없는 것으로 본다."""

    model_config = ConfigDict(extra="ignore")

    company_name: Optional[str] = Field(default=None, alias="companyName")
    company_address: Optional[str] = Field(default=None, alias="companyAddress")
    company_phone: Optional[str] = Field(default=None, alias="companyPhone")
    company_email: Optional[str] = Field(default=None, alias="companyEmail")
    company_tax_code: Optional[str] = Field(default=None, alias="companyTaxCode")
    company_bank_name: Optional[str] = Field(default=None, alias="companyBankName")
    company_bank_account: Optional[str] = Field(default=None, alias="companyBankAccount")
    company_bank_account_name: Optional[str] = Field(default=None, alias="companyBankAccountName")
    company_bank_branch: Optional[str] = Field(default=None, alias="companyBankBranch")
    company_accounting_email: Optional[str] = Field(default=None, alias="companyAccountingEmail")
    company_website: Optional[str] = Field(default=None, alias="companyWebsite")

    @field_validator("*", mode="before")
    @classmethod
    def _strings_only(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None


# (CompanyProfile 필드, payload 필드, CompanyDefaults 필드)
_PROFILE_FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ("name", "company_name", "name"),
    ("address", "company_address", "address"),
    ("phone", "company_phone", "phone"),
    ("email", "company_email", "email"),
    ("tax_code", "company_tax_code", "tax_code"),
    ("bank_name", "company_bank_name", "bank_name"),
    ("bank_account_number", "company_bank_account", "bank_account_number"),
    ("bank_account_name", "company_bank_account_name", "bank_account_name"),
    ("bank_branch", "company_bank_branch", "bank_branch"),
    ("accounting_email", "company_accounting_email", "accounting_email"),
    ("website", "company_website", "website"),
)


def parse_document_id(value: Any) -> int:
    """양의 정수 또는 숫자 문자열만 허용한다."""

    if isinstance(value, bool):
        raise InvalidId(f"Invalid document id: {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        raise InvalidId(f"Invalid document id: {value!r}")
    if number <= 0:
        raise InvalidId(f"Document id must be positive: {number}")
    return number


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_int(value: Any) -> Optional[int]:
    number = to_decimal(value)
    if number is None:
        return None
    return int(number)


def _parse_settings_payload(raw: Any) -> GeneralSettingsPayload:
    data: Any = raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Company settings value is not valid JSON, using defaults")
            data = {}
    if not isinstance(data, dict):
        data = {}
    return GeneralSettingsPayload.model_validate(data)


def load_company_profile(repository: DocumentRepository, defaults: CompanyDefaults) -> CompanyProfile:
    """발행 회사 프로필을 만든다. 비어 있는 필드만 기본값으로 대체한다."""

    payload = _parse_settings_payload(repository.get_setting(defaults.settings_key))

    values: Dict[str, ProfileValue] = {}
    for profile_field, payload_field, default_field in _PROFILE_FIELDS:
        configured = _clean(getattr(payload, payload_field))
        if configured is not None:
            values[profile_field] = ProfileValue(configured, "configured")
        else:
            values[profile_field] = ProfileValue(getattr(defaults, default_field), "default")
    return CompanyProfile(**values)


def _counterparty(row: Row) -> Counterparty:
    return Counterparty(
        person=PartyInfo(
            name=_clean(row.get("customer_name")),
            email=_clean(row.get("customer_email")),
            phone=_clean(row.get("customer_phone")),
            address=_clean(row.get("customer_address")),
            tax_code=_clean(row.get("customer_tax_code")),
        ),
        company=PartyInfo(
            name=_clean(row.get("customer_company")),
            email=_clean(row.get("customer_company_email")),
            phone=_clean(row.get("customer_company_phone")),
            address=_clean(row.get("customer_company_address")),
            tax_code=_clean(row.get("customer_company_tax_code")),
        ),
    )


# ---------------------------------------------------------------------------
# invoice
# ---------------------------------------------------------------------------


def calculate_invoice_totals(items: Sequence[InvoiceItem]) -> Tuple[Decimal, Decimal, Decimal]:
    """(subtotal, tax, total). KCT(비과세) 항목은 세액 0."""

    subtotal = sum((item.net_amount for item in items), Decimal(0))
    tax = sum((item.tax_amount for item in items), Decimal(0))
    return subtotal, tax, subtotal + tax


def resolve_invoice_status(stored: Any, total: Decimal, paid: Decimal) -> str:
    status = (_clean(stored) or "").upper()
    if status in INVOICE_STATUSES:
        return status
    if total > 0 and paid >= total:
        return "PAID"
    if paid > 0:
        return "PARTIAL"
    return "DRAFT"


def _invoice_item(row: Row) -> InvoiceItem:
    exempt = (_clean(row.get("tax_label")) or "").upper() == TAX_EXEMPT_LABEL
    return InvoiceItem(
        description=_clean(row.get("description")) or "",
        quantity=to_decimal(row.get("quantity")) or Decimal(0),
        unit_price=to_decimal(row.get("unit_price")) or Decimal(0),
        tax_rate=Decimal(0) if exempt else (to_decimal(row.get("tax_rate")) or Decimal(0)),
        tax_exempt=exempt,
    )


def assemble_invoice(repository: DocumentRepository, invoice_id: Any, defaults: CompanyDefaults) -> Invoice:
    document_id = parse_document_id(invoice_id)
    row = repository.get_invoice(document_id)
    if row is None:
        raise NotFound(f"Invoice {document_id} not found")

    items = [_invoice_item(item) for item in repository.get_invoice_items(document_id)]
    computed_subtotal, computed_tax, _ = calculate_invoice_totals(items)

    subtotal = to_decimal(row.get("subtotal"))
    if subtotal is None:
        subtotal = computed_subtotal
    tax = to_decimal(row.get("tax"))
    if tax is None:
        tax = computed_tax
    total = subtotal + tax

    stored_total = to_decimal(row.get("total"))
    if stored_total is not None and abs(stored_total - total) > MONEY_TOLERANCE:
        logger.warning(
            "Invoice %s stored total %s differs from subtotal+tax %s, using computed value",
            document_id,
            stored_total,
            total,
        )

    paid = max(to_decimal(row.get("paid")) or Decimal(0), Decimal(0))
    raw_balance = total - paid
    if raw_balance < 0:
        logger.warning("Invoice %s is overpaid by %s, balance clamped to 0", document_id, -raw_balance)
    balance = max(raw_balance, Decimal(0))

    logger.debug("Assembled invoice %s with %d items", document_id, len(items))

    return Invoice(
        id=document_id,
        invoice_number=_clean(row.get("invoice_number")) or f"INV-{document_id}",
        status=resolve_invoice_status(row.get("status"), total, paid),
        currency=_clean(row.get("currency")) or defaults.currency,
        issue_date=to_date(row.get("issue_date")),
        due_date=to_date(row.get("due_date")),
        subtotal=subtotal,
        tax=tax,
        total=total,
        paid=paid,
        balance=balance,
        payment_method=(_clean(row.get("payment_method")) or "BANK_TRANSFER").upper(),
        notes=_clean(row.get("notes")),
        customer=_counterparty(row),
        items=items,
        company=load_company_profile(repository, defaults),
    )


# ---------------------------------------------------------------------------
# contract
# ---------------------------------------------------------------------------


def _index_by_id(rows: Sequence[Row]) -> Dict[int, Row]:
    indexed: Dict[int, Row] = {}
    for row in rows:
        row_id = _to_int(row.get("id"))
        if row_id is not None:
            indexed[row_id] = row
    return indexed


def _domain_attachments(repository: DocumentRepository, ids: Sequence[int]) -> List[DomainAttachment]:
    found = _index_by_id(repository.get_domains(ids))
    attachments: List[DomainAttachment] = []
    for service_id in ids:
        row = found.get(service_id)
        if row is None:
            logger.warning("Domain %s referenced but not found", service_id)
            attachments.append(DomainAttachment(id=service_id, domain_name=unresolved_label(service_id)))
            continue
        attachments.append(
            DomainAttachment(
                id=service_id,
                domain_name=_clean(row.get("domain_name")) or unresolved_label(service_id),
                registrar=_clean(row.get("registrar")),
                registration_date=to_date(row.get("registration_date")),
                expiry_date=to_date(row.get("expiry_date")),
                status=_clean(row.get("status")),
                price=to_decimal(row.get("price")),
            )
        )
    return attachments


def _hosting_attachments(repository: DocumentRepository, ids: Sequence[int]) -> List[HostingAttachment]:
    found = _index_by_id(repository.get_hostings(ids))
    attachments: List[HostingAttachment] = []
    for service_id in ids:
        row = found.get(service_id)
        if row is None:
            logger.warning("Hosting %s referenced but not found", service_id)
            attachments.append(HostingAttachment(id=service_id, plan_name=unresolved_label(service_id)))
            continue
        attachments.append(
            HostingAttachment(
                id=service_id,
                plan_name=_clean(row.get("plan_name")) or unresolved_label(service_id),
                storage=_to_int(row.get("storage")),
                bandwidth=_to_int(row.get("bandwidth")),
                price=to_decimal(row.get("price")),
                status=_clean(row.get("status")),
                expiry_date=to_date(row.get("expiry_date")),
                server_location=_clean(row.get("server_location")),
            )
        )
    return attachments


def _vps_attachments(repository: DocumentRepository, ids: Sequence[int]) -> List[VpsAttachment]:
    found = _index_by_id(repository.get_vpss(ids))
    attachments: List[VpsAttachment] = []
    for service_id in ids:
        row = found.get(service_id)
        if row is None:
            logger.warning("VPS %s referenced but not found", service_id)
            attachments.append(VpsAttachment(id=service_id, plan_name=unresolved_label(service_id)))
            continue
        attachments.append(
            VpsAttachment(
                id=service_id,
                plan_name=_clean(row.get("plan_name")) or unresolved_label(service_id),
                cpu=_to_int(row.get("cpu")),
                ram=_to_int(row.get("ram")),
                storage=_to_int(row.get("storage")),
                bandwidth=_to_int(row.get("bandwidth")),
                price=to_decimal(row.get("price")),
                status=_clean(row.get("status")),
                expiry_date=to_date(row.get("expiry_date")),
                os=_clean(row.get("os")),
                ip_address=_clean(row.get("ip_address")),
            )
        )
    return attachments


def assemble_contract(repository: DocumentRepository, contract_id: Any, defaults: CompanyDefaults) -> Contract:
    document_id = parse_document_id(contract_id)
    row = repository.get_contract(document_id)
    if row is None:
        raise NotFound(f"Contract {document_id} not found")

    service_ids = repository.get_contract_service_ids(document_id)
    domains = _domain_attachments(repository, service_ids.get("domain", []))
    hostings = _hosting_attachments(repository, service_ids.get("hosting", []))
    vpss = _vps_attachments(repository, service_ids.get("vps", []))

    order_id = _to_int(row.get("order_id"))

    logger.debug(
        "Assembled contract %s: %d domains, %d hostings, %d vps",
        document_id,
        len(domains),
        len(hostings),
        len(vpss),
    )

    return Contract(
        id=document_id,
        contract_number=_clean(row.get("contract_number")) or "",
        status=_clean(row.get("status")),
        order_status=_clean(row.get("order_status")),
        order_number=f"ORD-{order_id}" if order_id else None,
        created_at=to_date(row.get("created_at")),
        start_date=to_date(row.get("start_date")),
        end_date=to_date(row.get("end_date")),
        total_value=to_decimal(row.get("total_value")),
        customer=_counterparty(row),
        assigned_user_name=_clean(row.get("assigned_user_name")),
        assigned_user_email=_clean(row.get("assigned_user_email")),
        domains=domains,
        hostings=hostings,
        vpss=vpss,
        company=load_company_profile(repository, defaults.for_contracts()),
    )


# ---------------------------------------------------------------------------
# order
# ---------------------------------------------------------------------------


def _service_data_domain(raw: Any) -> Optional[str]:
    data = raw
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            return None
    if isinstance(data, dict):
        return _clean(data.get("domainName"))
    return None


def assemble_order(repository: DocumentRepository, order_id: Any) -> Order:
    document_id = parse_document_id(order_id)
    row = repository.get_order(document_id)
    if row is None:
        raise NotFound(f"Order {document_id} not found")

    item_rows = repository.get_order_items(document_id)
    ids: Dict[str, List[int]] = {"DOMAIN": [], "HOSTING": [], "VPS": []}
    for item in item_rows:
        service_type = (_clean(item.get("service_type")) or "").upper()
        service_id = _to_int(item.get("service_id"))
        if service_type in ids and service_id is not None and service_id not in ids[service_type]:
            ids[service_type].append(service_id)

    domain_names = {
        key: _clean(value.get("domain_name")) for key, value in _index_by_id(repository.get_domains(ids["DOMAIN"])).items()
    }
    hosting_names = {
        key: _clean(value.get("plan_name")) for key, value in _index_by_id(repository.get_hostings(ids["HOSTING"])).items()
    }
    vps_names = {
        key: _clean(value.get("plan_name")) for key, value in _index_by_id(repository.get_vpss(ids["VPS"])).items()
    }
    names_by_type = {"DOMAIN": domain_names, "HOSTING": hosting_names, "VPS": vps_names}

    items: List[OrderItem] = []
    for item in item_rows:
        service_type = (_clean(item.get("service_type")) or "").upper()
        service_id = _to_int(item.get("service_id")) or 0
        domain_name = _service_data_domain(item.get("service_data")) if service_type == "DOMAIN" else None
        service_name = names_by_type.get(service_type, {}).get(service_id)
        if service_type == "DOMAIN" and domain_name:
            service_name = domain_name
        if service_name is None and domain_name is None:
            logger.warning("Order %s item %s: %s %s could not be resolved", document_id, item.get("id"), service_type, service_id)
        quantity = _to_int(item.get("quantity"))
        items.append(
            OrderItem(
                id=_to_int(item.get("id")) or 0,
                service_type=service_type,
                service_id=service_id,
                quantity=1 if quantity is None else quantity,
                price=to_decimal(item.get("price")) or Decimal(0),
                domain_name=domain_name,
                service_name=service_name,
            )
        )

    logger.debug("Assembled order %s with %d items", document_id, len(items))

    return Order(
        id=document_id,
        status=_clean(row.get("status")),
        payment_method=_clean(row.get("payment_method")),
        notes=_clean(row.get("notes")),
        created_at=to_date(row.get("created_at")),
        updated_at=to_date(row.get("updated_at")),
        total_amount=to_decimal(row.get("total_amount")),
        customer=_counterparty(row),
        assigned_user_name=_clean(row.get("assigned_user_name")),
        assigned_user_email=_clean(row.get("assigned_user_email")),
        items=items,
    )
