import json
import logging
from decimal import Decimal

import pytest

from billing_docs.documents.assembler import (
    assemble_contract,
    assemble_invoice,
    assemble_order,
    calculate_invoice_totals,
    load_company_profile,
    parse_document_id,
    resolve_invoice_status,
)
from billing_docs.documents.models import InvoiceItem
from billing_docs.exceptions import InvalidArgument, InvalidId, NotFound


@pytest.mark.parametrize("value, expected", [("12", 12), (7, 7), (" 3 ", 3)])
def test_parse_document_id_accepts_positive_integers(value, expected) -> None:
    assert parse_document_id(value) == expected


@pytest.mark.parametrize("value", ["abc", "0", "-3", "1.5", "", None, True, 0, -1])
def test_parse_document_id_rejects_invalid(value) -> None:
    with pytest.raises(InvalidId):
        parse_document_id(value)


def test_invalid_id_is_an_invalid_argument() -> None:
    assert issubclass(InvalidId, InvalidArgument)


def test_invalid_id_skips_repository(repository, defaults) -> None:
    with pytest.raises(InvalidId):
        assemble_invoice(repository, "abc", defaults)
    assert repository.calls == []


def test_assemble_invoice(repository, defaults) -> None:
    invoice = assemble_invoice(repository, "1", defaults)

    assert invoice.invoice_number == "INV-2024-001"
    assert invoice.status == "SENT"
    assert invoice.subtotal == Decimal("1500000.00")
    assert invoice.tax == Decimal("150000.00")
    assert invoice.total == invoice.subtotal + invoice.tax
    assert invoice.balance == invoice.total - invoice.paid
    assert len(invoice.items) == 2
    assert invoice.items[0].amount == Decimal("1100000")
    assert invoice.customer.company.name == "Công ty TNHH An Phát"
    assert invoice.customer.person.tax_code is None


def test_missing_invoice_raises_not_found(repository, defaults) -> None:
    with pytest.raises(NotFound):
        assemble_invoice(repository, 404, defaults)


def test_stored_total_mismatch_uses_computed_total(repository, defaults, caplog) -> None:
    repository.invoices[1]["total"] = "9999999"

    with caplog.at_level(logging.WARNING):
        invoice = assemble_invoice(repository, 1, defaults)

    assert invoice.total == Decimal("1650000.00")
    assert "differs" in caplog.text


def test_overpaid_invoice_clamps_balance(repository, defaults) -> None:
    repository.invoices[1].update({"status": "PAID", "paid": "2000000"})

    invoice = assemble_invoice(repository, 1, defaults)

    assert invoice.balance == Decimal(0)
    assert invoice.paid == Decimal("2000000")


def test_missing_stored_amounts_fall_back_to_items(repository, defaults) -> None:
    repository.invoices[1].update({"subtotal": None, "tax": None, "total": None})
    repository.invoice_items[1][1]["tax_label"] = "KCT"

    invoice = assemble_invoice(repository, 1, defaults)

    assert invoice.items[1].tax_exempt is True
    assert invoice.items[1].tax_amount == 0
    assert invoice.subtotal == Decimal("1500000")
    assert invoice.tax == Decimal("100000")


def test_calculate_invoice_totals() -> None:
    items = [
        InvoiceItem("A", Decimal(2), Decimal(100), Decimal(10)),
        InvoiceItem("B", Decimal(1), Decimal(50), Decimal(10), tax_exempt=True),
    ]

    assert calculate_invoice_totals(items) == (Decimal(250), Decimal(20), Decimal(270))
    assert calculate_invoice_totals([]) == (0, 0, 0)


@pytest.mark.parametrize(
    "stored, total, paid, expected",
    [
        ("overdue", 100, 0, "OVERDUE"),
        ("UNKNOWN", 100, 100, "PAID"),
        (None, 100, 30, "PARTIAL"),
        ("", 100, 0, "DRAFT"),
        ("weird", 0, 0, "DRAFT"),
    ],
)
def test_resolve_invoice_status(stored, total, paid, expected) -> None:
    assert resolve_invoice_status(stored, Decimal(total), Decimal(paid)) == expected


def test_company_profile_uses_defaults_per_field(repository, defaults) -> None:
    profile = load_company_profile(repository, defaults)

    assert profile.name.value == "Công ty Cổ phần CRM Portal"
    assert profile.name.source == "configured"
    # companyPhone 은 설정에 없다
    assert profile.phone.value == "0123 456 789"
    assert profile.phone.is_default
    assert profile.bank_name.value == "Vietcombank"
    assert profile.website.value == "https://crm.example.vn"


def test_contract_uses_its_own_contact_defaults(repository, defaults) -> None:
    contract = assemble_contract(repository, 1, defaults)
    invoice = assemble_invoice(repository, 1, defaults)

    # companyPhone 은 설정에 없다
    assert contract.company.phone.value == "1900 1234"
    assert invoice.company.phone.value == "0123 456 789"
    # 설정에 있는 값은 양쪽 모두 설정값
    assert contract.company.email.value == "contact@crm.vn"
    assert contract.company.name == invoice.company.name

    repository.settings.clear()
    contract = assemble_contract(repository, 1, defaults)
    assert contract.company.address.value == "123 Nguyễn Huệ, Q1, TP.HCM"
    assert contract.company.email.value == "support@crmportal.com"
    assert contract.company.tax_code.value == ""
    assert contract.company.website.value == "https://crm.example.vn"


def test_company_profile_ignores_blank_and_non_string_values(repository, defaults) -> None:
    repository.settings["general"] = {"companyName": "   ", "companyPhone": 123, "companyEmail": "a@b.vn"}

    profile = load_company_profile(repository, defaults)

    assert profile.name.value == "CRM Portal"
    assert profile.name.is_default
    assert profile.phone.value == "0123 456 789"
    assert profile.email.value == "a@b.vn"


@pytest.mark.parametrize("raw", [None, "{not json", "[1, 2]", json.dumps("text")])
def test_company_profile_unusable_settings_give_all_defaults(repository, defaults, raw) -> None:
    repository.settings["general"] = raw

    profile = load_company_profile(repository, defaults)

    assert profile.name.value == "CRM Portal"
    assert profile.bank_account_name.value == "CRM Portal"
    assert profile.tax_code.value == "0100000000"
    assert profile.bank_name.value == ""
    assert all(
        value.is_default
        for value in (profile.name, profile.address, profile.email, profile.bank_branch, profile.accounting_email)
    )


def test_assemble_contract(repository, defaults) -> None:
    contract = assemble_contract(repository, 1, defaults)

    assert contract.document_number == "HD-2024-07"
    assert contract.order_number == "ORD-5"
    assert [item.domain_name for item in contract.domains] == ["anphat.vn"]
    assert contract.hostings[0].storage == 20
    assert contract.vpss[0].os == "Ubuntu 22.04"
    assert contract.assigned_user_email == "binh@crm.vn"


def test_contract_unresolved_service_ids_get_placeholder(repository, defaults) -> None:
    repository.contract_services[1] = {"domain": [], "hosting": [2, 99], "vps": [77]}

    contract = assemble_contract(repository, 1, defaults)

    assert contract.domains == []
    assert [item.plan_name for item in contract.hostings] == ["Hosting Business", "Mã dịch vụ: 99"]
    assert contract.vpss[0].plan_name == "Mã dịch vụ: 77"


def test_contract_without_number_uses_fallback(repository, defaults) -> None:
    repository.contracts[1]["contract_number"] = None

    contract = assemble_contract(repository, 1, defaults)

    assert contract.document_number == "hop-dong-1"


def test_missing_contract_raises_not_found(repository, defaults) -> None:
    with pytest.raises(NotFound):
        assemble_contract(repository, 2, defaults)


def test_assemble_order_resolves_service_names(repository) -> None:
    order = assemble_order(repository, "5")

    assert order.order_number == "ORD-5"
    domain, hosting = order.items
    assert domain.domain_name == "anphat.vn"
    assert domain.display_name == "anphat.vn"
    assert hosting.service_name == "Hosting Business"
    assert hosting.subtotal == Decimal("1000000")


def test_order_domain_name_from_dict_service_data(repository) -> None:
    repository.order_items[5][0]["service_data"] = {"domainName": "moi.vn"}

    order = assemble_order(repository, 5)

    assert order.items[0].display_name == "moi.vn"


def test_order_unresolved_items_get_placeholder(repository) -> None:
    repository.order_items[5] = [
        {"id": 20, "service_type": "vps", "service_id": 42, "quantity": None, "price": "300000", "service_data": "{bad"},
    ]

    order = assemble_order(repository, 5)

    item = order.items[0]
    assert item.service_type == "VPS"
    assert item.quantity == 1
    assert item.display_name == "Mã dịch vụ: 42"


def test_missing_order_raises_not_found(repository) -> None:
    with pytest.raises(NotFound):
        assemble_order(repository, 6)
