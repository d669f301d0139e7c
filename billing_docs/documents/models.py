from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

ProfileSource = Literal["configured", "default"]

INVOICE_STATUSES = ("DRAFT", "SENT", "PARTIAL", "OVERDUE", "PAID")
TAX_EXEMPT_LABEL = "KCT"


@dataclass(frozen=True)
class ProfileValue:
    """회사 설정 값 1개. 설정에서 왔는지(configured) 기본값인지(default) 구분한다."""

    value: str
    source: ProfileSource

    @property
    def is_default(self) -> bool:
        return self.source == "default"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CompanyProfile:
    name: ProfileValue
    address: ProfileValue
    phone: ProfileValue
    email: ProfileValue
    tax_code: ProfileValue
    bank_name: ProfileValue
    bank_account_number: ProfileValue
    bank_account_name: ProfileValue
    bank_branch: ProfileValue
    accounting_email: ProfileValue
    website: ProfileValue


@dataclass(frozen=True)
class PartyInfo:
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_code: Optional[str] = None

    def has_any(self) -> bool:
        return any(
            value is not None and str(value).strip()
            for value in (self.name, self.email, self.phone, self.address, self.tax_code)
        )


@dataclass(frozen=True)
class Counterparty:
    """거래 상대방. 개인 정보(person)와 소속 회사 정보(company)를 함께 가진다."""

    person: PartyInfo = field(default_factory=PartyInfo)
    company: PartyInfo = field(default_factory=PartyInfo)


@dataclass(frozen=True)
class InvoiceItem:
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal = Decimal(0)
    tax_exempt: bool = False

    @property
    def net_amount(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def tax_amount(self) -> Decimal:
        if self.tax_exempt:
            return Decimal(0)
        return self.net_amount * self.tax_rate / 100

    @property
    def amount(self) -> Decimal:
        return self.net_amount + self.tax_amount


@dataclass(frozen=True)
class Invoice:
    id: int
    invoice_number: str
    status: str
    currency: str
    issue_date: Optional[date]
    due_date: Optional[date]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    paid: Decimal
    balance: Decimal
    payment_method: str
    notes: Optional[str]
    customer: Counterparty
    items: List[InvoiceItem]
    company: CompanyProfile

    @property
    def is_partial(self) -> bool:
        return self.status == "PARTIAL" and self.paid > 0


@dataclass(frozen=True)
class DomainAttachment:
    id: int
    domain_name: str
    registrar: Optional[str] = None
    registration_date: Optional[date] = None
    expiry_date: Optional[date] = None
    status: Optional[str] = None
    price: Optional[Decimal] = None


@dataclass(frozen=True)
class HostingAttachment:
    id: int
    plan_name: str
    storage: Optional[int] = None
    bandwidth: Optional[int] = None
    price: Optional[Decimal] = None
    status: Optional[str] = None
    expiry_date: Optional[date] = None
    server_location: Optional[str] = None


@dataclass(frozen=True)
class VpsAttachment:
    id: int
    plan_name: str
    cpu: Optional[int] = None
    ram: Optional[int] = None
    storage: Optional[int] = None
    bandwidth: Optional[int] = None
    price: Optional[Decimal] = None
    status: Optional[str] = None
    expiry_date: Optional[date] = None
    os: Optional[str] = None
    ip_address: Optional[str] = None


@dataclass(frozen=True)
class Contract:
    id: int
    contract_number: str
    status: Optional[str]
    order_status: Optional[str]
    order_number: Optional[str]
    created_at: Optional[date]
    start_date: Optional[date]
    end_date: Optional[date]
    total_value: Optional[Decimal]
    customer: Counterparty
    assigned_user_name: Optional[str]
    assigned_user_email: Optional[str]
    domains: List[DomainAttachment]
    hostings: List[HostingAttachment]
    vpss: List[VpsAttachment]
    company: CompanyProfile

    @property
    def document_number(self) -> str:
        return self.contract_number or f"hop-dong-{self.id}"


def unresolved_label(service_id: int) -> str:
    return f"Mã dịch vụ: {service_id}"


@dataclass(frozen=True)
class OrderItem:
    id: int
    service_type: str
    service_id: int
    quantity: int
    price: Decimal
    domain_name: Optional[str] = None
    service_name: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    @property
    def display_name(self) -> str:
        return self.service_name or self.domain_name or unresolved_label(self.service_id)


@dataclass(frozen=True)
class Order:
    id: int
    status: Optional[str]
    payment_method: Optional[str]
    notes: Optional[str]
    created_at: Optional[date]
    updated_at: Optional[date]
    total_amount: Optional[Decimal]
    customer: Counterparty
    assigned_user_name: Optional[str]
    assigned_user_email: Optional[str]
    items: List[OrderItem]

    @property
    def order_number(self) -> str:
        return f"ORD-{self.id}"
