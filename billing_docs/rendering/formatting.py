from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

PLACEHOLDER = "Chưa cập nhật"
NOT_AVAILABLE = "N/A"
DATE_FORMAT = "%d/%m/%Y"


def to_decimal(value: Any) -> Optional[Decimal]:
    """DB/JSON 에서 온 숫자 값을 Decimal 로 바꾼다. 해석 불가하거나 유한하지 않으면 None."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    else:
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            return None
    if not number.is_finite():
        return None
    return number


def _group_thousands(number: int) -> str:
    return f"{abs(number):,}".replace(",", ".")


def format_currency(value: Any, currency: str = "VND") -> str:
    """vi-VN 자릿수 구분(.)을 쓴 정수 금액 + 통화 접미사. 예: 1.500.000 VND"""

    number = to_decimal(value)
    if number is None:
        return NOT_AVAILABLE
    rounded = int(number.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    return f"{sign}{_group_thousands(rounded)} {currency or 'VND'}"


def format_quantity(value: Any) -> str:
    number = to_decimal(value)
    if number is None:
        return NOT_AVAILABLE
    if number == number.to_integral_value():
        return str(int(number))
    return format(number.normalize(), "f").replace(".", ",")


def format_tax_rate(rate: Any, exempt: bool = False) -> str:
    if exempt:
        return "KCT"
    number = to_decimal(rate) or Decimal(0)
    return f"{format_quantity(number)}%"


def to_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_date(value: Any) -> str:
    resolved = to_date(value)
    if resolved is None:
        return NOT_AVAILABLE
    return resolved.strftime(DATE_FORMAT)


def format_badge(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text.upper() if text else None


def normalize_text(value: Any, fallback: str = PLACEHOLDER) -> str:
    """None/공백 문자열을 fallback 으로 바꾼다. 빈 칸이 렌더링되지 않도록 한다."""

    if value is None:
        return fallback
    text = str(value).strip()
    return text if text else fallback
