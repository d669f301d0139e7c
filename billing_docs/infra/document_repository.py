from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import psycopg2
from psycopg2.extras import RealDictCursor

Row = Dict[str, Any]


class DocumentRepository(ABC):
    """문서 생성에 필요한 레코드를 읽어 오는 읽기 전용 저장소 추상화.

    모든 메서드는 컬럼명을 키로 하는 dict 를 반환하며, 쓰기 작업은 없다.
    """

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Row]:
        """청구서 1건 + 고객 컬럼(customer_*, customer_company_*)을 반환한다."""

    @abstractmethod
    def get_invoice_items(self, invoice_id: int) -> List[Row]:
        """청구서 항목 목록을 id 순서로 반환한다."""

    @abstractmethod
    def get_contract(self, contract_id: int) -> Optional[Row]:
        """계약 1건 + 고객/담당자/주문 컬럼을 반환한다."""

    @abstractmethod
    def get_contract_service_ids(self, contract_id: int) -> Dict[str, List[int]]:
        """계약에 연결된 서비스 ID 를 {"domain": [...], "hosting": [...], "vps": [...]} 로 반환한다."""

    @abstractmethod
    def get_domains(self, ids: Sequence[int]) -> List[Row]:
        """도메인 레코드를 ID 목록으로 일괄 조회한다."""

    @abstractmethod
    def get_hostings(self, ids: Sequence[int]) -> List[Row]:
        """호스팅 레코드(패키지 스펙 포함)를 ID 목록으로 일괄 조회한다."""

    @abstractmethod
    def get_vpss(self, ids: Sequence[int]) -> List[Row]:
        """VPS 레코드(패키지 스펙 포함)를 ID 목록으로 일괄 조회한다."""

    @abstractmethod
    def get_order(self, order_id: int) -> Optional[Row]:
        """주문 1건 + 고객/담당자 컬럼을 반환한다."""

    @abstractmethod
    def get_order_items(self, order_id: int) -> List[Row]:
        """주문 항목 목록을 id 순서로 반환한다."""

    @abstractmethod
    def get_setting(self, key: str) -> Optional[Any]:
        """settings 테이블의 value(JSON) 를 반환한다. 없으면 None."""


_CUSTOMER_COLUMNS = """
    c.name AS customer_name,
    c.email AS customer_email,
    c.phone AS customer_phone,
    c.address AS customer_address,
    c.tax_code AS customer_tax_code,
    c.company AS customer_company,
    c.company_email AS customer_company_email,
    c.company_phone AS customer_company_phone,
    c.company_address AS customer_company_address,
    c.company_tax_code AS customer_company_tax_code
"""


class PostgresDocumentRepository(DocumentRepository):
    """PostgreSQL 기반 DocumentRepository 구현.

    스키마는 플랫폼 본체가 소유한다. 여기서는 SELECT 만 수행한다.
    서비스 배치 조회는 빈 ID 목록이면 쿼리 없이 빈 리스트를 돌려준다.
    """

    def __init__(self, db_url: str):
        self._db_url = db_url

    def _get_conn(self):
        return psycopg2.connect(self._db_url)

    def _fetch_one(self, query: str, params: Sequence[Any]) -> Optional[Row]:
        conn = self._get_conn()
        try:
            with conn:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    cur.execute(query, params)
                    row = cur.fetchone()
        finally:
            conn.close()
        if not row:
            return None
        return dict(row)

    def _fetch_all(self, query: str, params: Sequence[Any]) -> List[Row]:
        conn = self._get_conn()
        try:
            with conn:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    cur.execute(query, params)
                    rows = cur.fetchall()
        finally:
            conn.close()
        return [dict(row) for row in rows]

    def get_invoice(self, invoice_id: int) -> Optional[Row]:
        return self._fetch_one(
            f"""
            SELECT
                i.id,
                i.invoice_number,
                i.status,
                i.issue_date,
                i.due_date,
                i.currency,
                i.payment_method,
                i.notes,
                i.subtotal,
                i.tax,
                i.total,
                i.paid,
                i.balance,
                {_CUSTOMER_COLUMNS}
            FROM invoices i
            LEFT JOIN customers c ON c.id = i.customer_id
            WHERE i.id = %s
            LIMIT 1
            """,
            (invoice_id,),
        )

    def get_invoice_items(self, invoice_id: int) -> List[Row]:
        return self._fetch_all(
            """
            SELECT id, description, quantity, unit_price, tax_rate, tax_label
            FROM invoice_items
            WHERE invoice_id = %s
            ORDER BY id ASC
            """,
            (invoice_id,),
        )

    def get_contract(self, contract_id: int) -> Optional[Row]:
        return self._fetch_one(
            f"""
            SELECT
                ct.id,
                ct.contract_number,
                ct.order_id,
                ct.start_date,
                ct.end_date,
                ct.total_value,
                ct.status,
                ct.created_at,
                o.status AS order_status,
                u.name AS assigned_user_name,
                u.email AS assigned_user_email,
                {_CUSTOMER_COLUMNS}
            FROM contracts ct
            LEFT JOIN customers c ON c.id = ct.customer_id
            LEFT JOIN orders o ON o.id = ct.order_id
            LEFT JOIN users u ON u.id = ct.user_id
            WHERE ct.id = %s
            LIMIT 1
            """,
            (contract_id,),
        )

    def get_contract_service_ids(self, contract_id: int) -> Dict[str, List[int]]:
        domain_rows = self._fetch_all(
            "SELECT domain_id FROM contract_domains WHERE contract_id = %s ORDER BY id ASC",
            (contract_id,),
        )
        hosting_rows = self._fetch_all(
            "SELECT hosting_id FROM contract_hostings WHERE contract_id = %s ORDER BY id ASC",
            (contract_id,),
        )
        vps_rows = self._fetch_all(
            "SELECT vps_id FROM contract_vpss WHERE contract_id = %s ORDER BY id ASC",
            (contract_id,),
        )
        return {
            "domain": [row["domain_id"] for row in domain_rows],
            "hosting": [row["hosting_id"] for row in hosting_rows],
            "vps": [row["vps_id"] for row in vps_rows],
        }

    def get_domains(self, ids: Sequence[int]) -> List[Row]:
        if not ids:
            return []
        return self._fetch_all(
            """
            SELECT
                d.id,
                d.domain_name,
                d.registrar,
                d.registration_date,
                d.expiry_date,
                d.status,
                p.price
            FROM domain d
            LEFT JOIN domain_packages p ON p.id = d.domain_type_id
            WHERE d.id = ANY(%s)
            """,
            (list(ids),),
        )

    def get_hostings(self, ids: Sequence[int]) -> List[Row]:
        if not ids:
            return []
        return self._fetch_all(
            """
            SELECT
                h.id,
                p.plan_name,
                p.storage,
                p.bandwidth,
                p.price,
                p.server_location,
                h.status,
                h.expiry_date
            FROM hosting h
            LEFT JOIN hosting_packages p ON p.id = h.hosting_type_id
            WHERE h.id = ANY(%s)
            """,
            (list(ids),),
        )

    def get_vpss(self, ids: Sequence[int]) -> List[Row]:
        if not ids:
            return []
        return self._fetch_all(
            """
            SELECT
                v.id,
                p.plan_name,
                p.cpu,
                p.ram,
                p.storage,
                p.bandwidth,
                p.price,
                p.os,
                v.ip_address,
                v.status,
                v.expiry_date
            FROM vps v
            LEFT JOIN vps_packages p ON p.id = v.vps_type_id
            WHERE v.id = ANY(%s)
            """,
            (list(ids),),
        )

    def get_order(self, order_id: int) -> Optional[Row]:
        return self._fetch_one(
            f"""
            SELECT
                o.id,
                o.total_amount,
                o.status,
                o.payment_method,
                o.notes,
                o.created_at,
                o.updated_at,
                u.name AS assigned_user_name,
                u.email AS assigned_user_email,
                {_CUSTOMER_COLUMNS}
            FROM orders o
            LEFT JOIN customers c ON c.id = o.customer_id
            LEFT JOIN users u ON u.id = o.user_id
            WHERE o.id = %s
            LIMIT 1
            """,
            (order_id,),
        )

    def get_order_items(self, order_id: int) -> List[Row]:
        return self._fetch_all(
            """
            SELECT id, service_type, service_id, quantity, price, service_data
            FROM order_items
            WHERE order_id = %s
            ORDER BY id ASC
            """,
            (order_id,),
        )

    def get_setting(self, key: str) -> Optional[Any]:
        row = self._fetch_one("SELECT value FROM settings WHERE key = %s LIMIT 1", (key,))
        if row is None:
            return None
        return row["value"]
