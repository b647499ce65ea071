from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.schoolflow.schoolflow.core.enums import DocumentStatus, ItemKind, TransactionType
from src.schoolflow.schoolflow.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def billing(container, repos):
    repos.students.put("s1", "Aarav")
    repos.enrollments.enroll("s1", "Speech Therapy", "Monthly", 15000)
    return container


def test_ad_hoc_pending_invoice_has_single_charge_item(billing, repos, today):
    invoice = billing.invoice_generator.create_ad_hoc_invoice(
        student_id="s1",
        type="Other",
        amount="750",
        description="Assessment kit",
        today=today,
    )

    assert invoice.status == DocumentStatus.PENDING
    assert invoice.period == "2024-01"
    assert invoice.due_date == today
    assert len(invoice.items) == 1
    assert invoice.items[0].kind == ItemKind.CHARGE
    assert invoice.items[0].description == "Other: Assessment kit"
    assert invoice.amount_due == Decimal("750.00")
    assert repos.transactions.rows == []


def test_ad_hoc_paid_invoice_records_fee_transaction(billing, repos, today):
    invoice = billing.invoice_generator.create_ad_hoc_invoice(
        student_id="s1",
        type="Fine",
        amount="300",
        description="Lost card",
        status="Paid",
        today=today,
    )

    assert invoice.payment_date == today
    [txn] = repos.transactions.rows
    assert txn.type == TransactionType.FEE
    assert txn.amount == Decimal("300.00")
    assert txn.entity_id == "s1"
    assert txn.description == f"Instant Payment: Fine ({invoice.invoice_no})"


def test_ad_hoc_invoice_does_not_count_as_tuition(billing, repos, today):
    billing.invoice_generator.create_ad_hoc_invoice(
        student_id="s1", type="Other", amount="100", description="Trip", today=today
    )

    result = billing.invoice_generator.generate_invoices("2024-01", today=today)

    assert result.generated == 1
    assert repos.invoices.get_by_id(result.document_ids[0]).has_tuition


@pytest.mark.parametrize("amount", ["0", "-5", "abc", None])
def test_ad_hoc_invoice_rejects_bad_amounts(billing, amount):
    with pytest.raises(ValidationError):
        billing.invoice_generator.create_ad_hoc_invoice(
            student_id="s1", type="Fine", amount=amount, description="x"
        )


def test_ad_hoc_invoice_for_unknown_student(billing):
    with pytest.raises(NotFoundError):
        billing.invoice_generator.create_ad_hoc_invoice(
            student_id="ghost", type="Fine", amount="10", description="x"
        )


def test_charge_is_queued_when_no_open_invoice(billing, repos):
    outcome = billing.invoice_generator.queue_or_merge_student_charge(
        student_id="s1", type="Fine", amount="500", description="Late pickup", effective_date=date(2024, 1, 20)
    )

    assert outcome.merged is False
    assert outcome.invoice_id is None
    adj = repos.student_adjustments.get_by_id(outcome.adjustment_id)
    assert not adj.is_applied
    assert adj.effective_date == date(2024, 1, 20)


def test_charge_merges_into_latest_pending_invoice(billing, repos, today):
    result = billing.invoice_generator.generate_invoices("2024-01", today=today)
    invoice_id = result.document_ids[0]

    outcome = billing.invoice_generator.queue_or_merge_student_charge(
        student_id="s1", type="Other", amount="250", description="Materials"
    )

    assert outcome.merged is True
    assert outcome.invoice_id == invoice_id
    invoice = repos.invoices.get_by_id(invoice_id)
    assert invoice.amount_due == Decimal("15250")
    assert invoice.items[-1].adjustment_id == outcome.adjustment_id
    assert repos.student_adjustments.get_by_id(outcome.adjustment_id).document_id == invoice_id


def test_charge_is_not_merged_into_paid_invoice(billing, repos, today):
    result = billing.invoice_generator.generate_invoices("2024-01", today=today)
    billing.invoice_lifecycle.mark_paid(result.document_ids[0], today=today)

    outcome = billing.invoice_generator.queue_or_merge_student_charge(
        student_id="s1", type="Other", amount="250", description="Materials"
    )

    assert outcome.merged is False
    assert repos.invoices.get_by_id(result.document_ids[0]).amount_due == Decimal("15000")


def test_failed_paid_ad_hoc_invoice_is_not_kept(billing, repos, today):
    repos.transactions.fail_append = True

    with pytest.raises(RuntimeError):
        billing.invoice_generator.create_ad_hoc_invoice(
            student_id="s1", type="Fine", amount="300", description="Lost card", status="Paid", today=today
        )

    assert repos.invoices.all() == []


def test_failed_charge_record_leaves_open_invoice_untouched(billing, repos, today):
    result = billing.invoice_generator.generate_invoices("2024-01", today=today)
    invoice_id = result.document_ids[0]
    repos.student_adjustments.fail_add = True

    with pytest.raises(RuntimeError):
        billing.invoice_generator.queue_or_merge_student_charge(
            student_id="s1", type="Other", amount="500", description="Field trip"
        )

    invoice = repos.invoices.get_by_id(invoice_id)
    assert invoice.amount_due == Decimal("15000")
    assert len(invoice.items) == 1
    assert repos.student_adjustments.all() == []


def test_failed_invoice_update_discards_merged_charge(billing, repos, today):
    result = billing.invoice_generator.generate_invoices("2024-01", today=today)
    repos.invoices.fail_update = True

    with pytest.raises(RuntimeError):
        billing.invoice_generator.queue_or_merge_student_charge(
            student_id="s1", type="Other", amount="500", description="Field trip"
        )

    assert repos.invoices.get_by_id(result.document_ids[0]).amount_due == Decimal("15000")
    assert repos.student_adjustments.all() == []
