import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest
import reportlab
from reportlab.lib.colors import Color

from billing_docs.documents.assembler import CompanyDefaults
from billing_docs.infra.assets import InMemoryAssetProvider
from billing_docs.infra.document_repository import DocumentRepository, Row
from billing_docs.infra.pdf_generator import embed_fonts
from billing_docs.rendering.context import PageGeometry, RenderContext, Surface

FONT_DIR = Path(reportlab.__file__).parent / "fonts"


@dataclass
class DrawOp:
    kind: str
    page: int
    x: float
    y: float
    text: str = ""
    font: str = ""
    size: float = 0
    color: Optional[Color] = None
    width: float = 0
    height: float = 0


class RecordingSurface(Surface):
    """그리기 호출을 기록만 하는 Surface. PDF 바이트 없이 페이지 나눔/좌표를 검사한다."""

    def __init__(self) -> None:
        self.ops: List[DrawOp] = []
        self.page = 1

    def draw_text(self, x, y, text, font, size, color) -> None:
        self.ops.append(DrawOp("text", self.page, x, y, text=text, font=font, size=size, color=color))

    def draw_rect(self, x, y, width, height, *, fill=None, stroke=None, stroke_width=1, fill_opacity=1.0) -> None:
        self.ops.append(DrawOp("rect", self.page, x, y, color=fill or stroke, width=width, height=height))

    def draw_line(self, x1, y1, x2, y2, *, color, thickness=1) -> None:
        self.ops.append(DrawOp("line", self.page, x1, min(y1, y2), color=color, width=x2 - x1, height=abs(y2 - y1)))

    def draw_image(self, image, x, y, width, height) -> None:
        self.ops.append(DrawOp("image", self.page, x, y, width=width, height=height))

    def show_page(self) -> None:
        self.page += 1

    @property
    def texts(self) -> List[DrawOp]:
        return [op for op in self.ops if op.kind == "text"]

    def text_values(self) -> List[str]:
        return [op.text for op in self.texts]


class DummyRepository(DocumentRepository):
    """dict 기반 인메모리 저장소. 호출 기록(calls)을 남긴다."""

    def __init__(self) -> None:
        self.invoices: Dict[int, Row] = {}
        self.invoice_items: Dict[int, List[Row]] = {}
        self.contracts: Dict[int, Row] = {}
        self.contract_services: Dict[int, Dict[str, List[int]]] = {}
        self.domains: Dict[int, Row] = {}
        self.hostings: Dict[int, Row] = {}
        self.vpss: Dict[int, Row] = {}
        self.orders: Dict[int, Row] = {}
        self.order_items: Dict[int, List[Row]] = {}
        self.settings: Dict[str, Any] = {}
        self.calls: List[str] = []

    def _one(self, table: Dict[int, Row], key: int) -> Optional[Row]:
        row = table.get(key)
        return copy.deepcopy(row) if row is not None else None

    def _many(self, table: Dict[int, Row], ids: Sequence[int]) -> List[Row]:
        return [copy.deepcopy(table[i]) for i in ids if i in table]

    def get_invoice(self, invoice_id: int) -> Optional[Row]:
        self.calls.append("get_invoice")
        return self._one(self.invoices, invoice_id)

    def get_invoice_items(self, invoice_id: int) -> List[Row]:
        self.calls.append("get_invoice_items")
        return copy.deepcopy(self.invoice_items.get(invoice_id, []))

    def get_contract(self, contract_id: int) -> Optional[Row]:
        self.calls.append("get_contract")
        return self._one(self.contracts, contract_id)

    def get_contract_service_ids(self, contract_id: int) -> Dict[str, List[int]]:
        self.calls.append("get_contract_service_ids")
        return copy.deepcopy(self.contract_services.get(contract_id, {"domain": [], "hosting": [], "vps": []}))

    def get_domains(self, ids: Sequence[int]) -> List[Row]:
        self.calls.append("get_domains")
        return self._many(self.domains, ids)

    def get_hostings(self, ids: Sequence[int]) -> List[Row]:
        self.calls.append("get_hostings")
        return self._many(self.hostings, ids)

    def get_vpss(self, ids: Sequence[int]) -> List[Row]:
        self.calls.append("get_vpss")
        return self._many(self.vpss, ids)

    def get_order(self, order_id: int) -> Optional[Row]:
        self.calls.append("get_order")
        return self._one(self.orders, order_id)

    def get_order_items(self, order_id: int) -> List[Row]:
        self.calls.append("get_order_items")
        return copy.deepcopy(self.order_items.get(order_id, []))

    def get_setting(self, key: str) -> Optional[Any]:
        self.calls.append("get_setting")
        return copy.deepcopy(self.settings.get(key))


CUSTOMER_COLUMNS: Row = {
    "customer_name": "Nguyễn Văn An",
    "customer_email": "an@example.vn",
    "customer_phone": "0901 234 567",
    "customer_address": "12 Lê Lợi, Quận 1, TP.HCM",
    "customer_tax_code": None,
    "customer_company": "Công ty TNHH An Phát",
    "customer_company_email": "ketoan@anphat.vn",
    "customer_company_phone": "028 3822 1234",
    "customer_company_address": "45 Nguyễn Huệ, Quận 1, TP.HCM",
    "customer_company_tax_code": "0312345678",
}


def _seed(repo: DummyRepository) -> None:
    repo.invoices[1] = {
        "id": 1,
        "invoice_number": "INV-2024-001",
        "status": "SENT",
        "issue_date": "2024-05-01",
        "due_date": "2024-05-15",
        "currency": "VND",
        "payment_method": "BANK_TRANSFER",
        "notes": None,
        "subtotal": "1500000.00",
        "tax": "150000.00",
        "total": "1650000.00",
        "paid": "0",
        "balance": "1650000.00",
        **CUSTOMER_COLUMNS,
    }
    repo.invoice_items[1] = [
        {"id": 1, "description": "Hosting Business 12 tháng", "quantity": 1, "unit_price": "1000000", "tax_rate": 10, "tax_label": None},
        {"id": 2, "description": "Tên miền anphat.vn", "quantity": 1, "unit_price": "500000", "tax_rate": 10, "tax_label": None},
    ]

    repo.contracts[1] = {
        "id": 1,
        "contract_number": "HD-2024-07",
        "order_id": 5,
        "start_date": "2024-06-01",
        "end_date": "2025-06-01",
        "total_value": "2000000",
        "status": "ACTIVE",
        "created_at": "2024-05-20T09:30:00",
        "order_status": "COMPLETED",
        "assigned_user_name": "Trần Thị Bình",
        "assigned_user_email": "binh@crm.vn",
        **CUSTOMER_COLUMNS,
    }
    repo.contract_services[1] = {"domain": [1], "hosting": [2], "vps": [3]}
    repo.domains[1] = {
        "id": 1,
        "domain_name": "anphat.vn",
        "registrar": "PA Vietnam",
        "registration_date": "2024-06-01",
        "expiry_date": "2025-06-01",
        "status": "active",
        "price": "500000",
    }
    repo.hostings[2] = {
        "id": 2,
        "plan_name": "Hosting Business",
        "storage": 20,
        "bandwidth": 200,
        "price": "1000000",
        "server_location": "Hà Nội",
        "status": "ACTIVE",
        "expiry_date": "2025-06-01",
    }
    repo.vpss[3] = {
        "id": 3,
        "plan_name": "VPS Pro",
        "cpu": 4,
        "ram": 8,
        "storage": 100,
        "bandwidth": 1000,
        "price": "500000",
        "os": "Ubuntu 22.04",
        "ip_address": "103.1.2.3",
        "status": "ACTIVE",
        "expiry_date": "2025-06-01",
    }

    repo.orders[5] = {
        "id": 5,
        "total_amount": "1500000",
        "status": "COMPLETED",
        "payment_method": "BANK_TRANSFER",
        "notes": "Giao hàng trong giờ hành chính.",
        "created_at": "2024-05-18T10:00:00",
        "updated_at": "2024-05-19T16:45:00",
        "assigned_user_name": "Trần Thị Bình",
        "assigned_user_email": "binh@crm.vn",
        **CUSTOMER_COLUMNS,
    }
    repo.order_items[5] = [
        {"id": 10, "service_type": "DOMAIN", "service_id": 1, "quantity": 1, "price": "500000", "service_data": json.dumps({"domainName": "anphat.vn"})},
        {"id": 11, "service_type": "HOSTING", "service_id": 2, "quantity": 1, "price": "1000000", "service_data": None},
    ]

    repo.settings["general"] = json.dumps(
        {
            "companyName": "Công ty Cổ phần CRM Portal",
            "companyAddress": "100 Trần Hưng Đạo, Hà Nội",
            "companyEmail": "contact@crm.vn",
            "companyTaxCode": "0109999999",
            "companyBankName": "Vietcombank",
            "companyBankAccount": "0011001234567",
            "companyBankAccountName": "CONG TY CP CRM PORTAL",
            "companyBankBranch": "Hoàn Kiếm",
        }
    )


@pytest.fixture
def repository() -> DummyRepository:
    repo = DummyRepository()
    _seed(repo)
    return repo


@pytest.fixture
def defaults() -> CompanyDefaults:
    return CompanyDefaults(name="CRM Portal", bank_account_name="CRM Portal", website="https://crm.example.vn")


@pytest.fixture(scope="session")
def font_bytes():
    return (FONT_DIR / "Vera.ttf").read_bytes(), (FONT_DIR / "VeraBd.ttf").read_bytes()


@pytest.fixture
def assets(font_bytes) -> InMemoryAssetProvider:
    regular, bold = font_bytes
    return InMemoryAssetProvider(regular, bold)


@pytest.fixture
def fonts(assets):
    return embed_fonts(assets)


@pytest.fixture
def make_ctx(fonts):
    """RecordingSurface 에 그리는 RenderContext 팩토리."""

    def _make(geometry: Optional[PageGeometry] = None, **kwargs) -> RenderContext:
        return RenderContext(
            surface=RecordingSurface(),
            fonts=fonts,
            geometry=geometry or PageGeometry(),
            **kwargs,
        )

    return _make
