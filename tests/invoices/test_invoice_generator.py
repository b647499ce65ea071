from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from src.schoolflow.schoolflow.core.enums import ItemKind, PersonStatus
from src.schoolflow.schoolflow.core.exceptions import NotFoundError, ValidationError

PERIOD = "2024-01"


@pytest.fixture
def billing(container, repos):
    repos.students.put("s1", "Aarav")
    return container


def _record_fine(container, student_id="s1", amount="500", description="Late pickup"):
    return container.student_adjustments.record_pending(
        owner_id=student_id,
        type="Fine",
        amount=amount,
        description=description,
        effective_date=date(2024, 1, 15),
    )


def test_monthly_tuition_plus_pending_fine_billed_once(billing, repos, today):
    repos.enrollments.enroll("s1", "Speech Therapy", "Monthly", 15000)
    fine = _record_fine(billing)

    first = billing.invoice_generator.generate_invoices(PERIOD, today=today)
    assert first.generated == 1

    invoice = repos.invoices.get_by_id(first.document_ids[0])
    assert invoice.amount_due == Decimal("15500")
    assert [i.kind for i in invoice.items] == [ItemKind.TUITION, ItemKind.ADJUSTMENT]
    assert invoice.items[1].description == "Fine: Late pickup"
    assert invoice.due_date == today + timedelta(days=10)
    assert repos.student_adjustments.get_by_id(fine.adjustment_id).document_id == invoice.invoice_id

    second = billing.invoice_generator.generate_invoices(PERIOD, today=today)
    assert second.generated == 0
    assert second.skipped == ["s1"]
    assert len(repos.invoices.all()) == 1


def test_daily_fee_with_no_attended_days_produces_no_item(billing, repos, today):
    repos.enrollments.enroll("s1", "Day Care", "Daily", 500)
    repos.attendance.mark("s1", "Student", date(2024, 1, 3), "Absent")

    result = billing.invoice_generator.generate_invoices(PERIOD, today=today)

    assert result.generated == 0
    assert repos.invoices.all() == []


def test_daily_fee_counts_present_and_late_days(billing, repos, today):
    repos.enrollments.enroll("s1", "Day Care", "Daily", 500)
    repos.attendance.mark("s1", "Student", date(2024, 1, 2), "Present")
    repos.attendance.mark("s1", "Student", date(2024, 1, 3), "Late")
    repos.attendance.mark("s1", "Student", date(2024, 1, 4), "Present")
    repos.attendance.mark("s1", "Student", date(2024, 1, 5), "Absent")
    repos.attendance.mark("s1", "Student", date(2024, 2, 1), "Present")

    result = billing.invoice_generator.generate_invoices(PERIOD, today=today)

    invoice = repos.invoices.get_by_id(result.document_ids[0])
    assert len(invoice.items) == 1
    assert invoice.items[0].description == "Day Care (3 days)"
    assert invoice.items[0].amount == Decimal("1500")


def test_second_run_bills_new_charges_without_tuition(billing, repos, today):
    repos.enrollments.enroll("s1", "Speech Therapy", "Monthly", 15000)
    billing.invoice_generator.generate_invoices(PERIOD, today=today)

    _record_fine(billing, amount="200", description="Books")
    result = billing.invoice_generator.generate_invoices(PERIOD, today=today)

    assert result.generated == 1
    extra = repos.invoices.get_by_id(result.document_ids[0])
    assert not extra.has_tuition
    assert extra.amount_due == Decimal("200")
    assert billing.invoice_generator.tuition_billed("s1", PERIOD)


def test_invoice_numbers_increase_from_configured_start(billing, repos, today):
    repos.students.put("s2", "Sara")
    repos.enrollments.enroll("s1", "Speech Therapy", "Monthly", 15000)
    repos.enrollments.enroll("s2", "Speech Therapy", "Monthly", 12000)

    billing.invoice_generator.generate_invoices(PERIOD, today=today)

    assert sorted(i.invoice_no for i in repos.invoices.all()) == ["INV-1001", "INV-1002"]


def test_inactive_students_are_not_billed(billing, repos, today):
    repos.students.put("s2", "Leo", status=PersonStatus.INACTIVE)
    repos.enrollments.enroll("s2", "Speech Therapy", "Monthly", 12000)

    result = billing.invoice_generator.generate_invoices(PERIOD, today=today)

    assert result.generated == 0
    assert "s2" not in result.skipped


def test_failed_adjustment_apply_rolls_back_the_invoice(billing, repos, today):
    repos.enrollments.enroll("s1", "Speech Therapy", "Monthly", 15000)
    ok_fine = _record_fine(billing, amount="100", description="A")
    bad_fine = _record_fine(billing, amount="200", description="B")
    repos.student_adjustments.fail_update_for.add(bad_fine.adjustment_id)

    with pytest.raises(RuntimeError):
        billing.invoice_generator.generate_invoices(PERIOD, student_id="s1", today=today)

    assert repos.invoices.all() == []
    assert not repos.student_adjustments.get_by_id(ok_fine.adjustment_id).is_applied
    assert not repos.student_adjustments.get_by_id(bad_fine.adjustment_id).is_applied


def test_batch_run_isolates_a_failing_student(billing, repos, today):
    repos.students.put("s2", "Sara")
    repos.enrollments.enroll("s1", "Speech Therapy", "Monthly", 15000)
    repos.enrollments.enroll("s2", "Speech Therapy", "Monthly", 12000)
    bad = _record_fine(billing, student_id="s1")
    repos.student_adjustments.fail_update_for.add(bad.adjustment_id)

    result = billing.invoice_generator.generate_invoices(PERIOD, today=today)

    assert result.generated == 1
    assert [f.entity_id for f in result.failures] == ["s1"]
    assert [i.student_id for i in repos.invoices.all()] == ["s2"]


def test_unknown_single_student_raises(billing, today):
    with pytest.raises(NotFoundError):
        billing.invoice_generator.generate_invoices(PERIOD, student_id="missing", today=today)


@pytest.mark.parametrize("period", ["2024-13", "2024/01", "", "Jan 2024"])
def test_invalid_period_rejected(billing, period):
    with pytest.raises(ValidationError):
        billing.invoice_generator.generate_invoices(period)
