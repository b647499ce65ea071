from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.schoolflow.schoolflow.core.enums import PersonStatus
from src.schoolflow.schoolflow.core.exceptions import NotFoundError

PERIOD = "2024-01"


@pytest.fixture
def payroll(container, repos):
    repos.staff.put("t1", "Nadia", 30000)
    repos.attendance.mark("t1", "Staff", date(2024, 1, 8), "Present")
    repos.attendance.mark("t1", "Staff", date(2024, 1, 9), "Absent")
    repos.attendance.mark("t1", "Staff", date(2024, 1, 10), "UnpaidLeave")
    repos.attendance.mark("t1", "Staff", date(2024, 1, 11), "PaidLeave")
    repos.attendance.mark("t1", "Staff", date(2024, 1, 12), "Late")
    return container


def test_slip_snapshots_attendance_and_sweeps_pending_adjustments(payroll, repos, fixed_now):
    bonus = payroll.payroll_adjustments.record_pending(owner_id="t1", type="Bonus", amount="2000", description="Festival")
    advance = payroll.payroll_adjustments.record_pending(
        owner_id="t1", type="Advance", amount="1000", description="Rent", effective_date=date(2024, 3, 1)
    )

    result = payroll.payroll_generator.generate_payroll(PERIOD, now=fixed_now)

    slip = repos.slips.get_by_id(result.document_ids[0])
    assert slip.staff_name == "Nadia"
    assert slip.base_salary == Decimal("30000")
    assert slip.attendance.as_dict() == {"present": 1, "late": 1, "absent": 2, "paid_leave": 1, "total_days": 5}
    assert slip.attendance_deduction == Decimal("1935.48")
    assert slip.total_bonuses == Decimal("2000")
    assert slip.total_deductions == Decimal("1000")
    assert slip.net_salary == Decimal("29064.52")
    assert slip.generated_at == fixed_now
    # effective dates do not gate the sweep
    assert sorted(slip.adjustment_ids) == sorted([bonus.adjustment_id, advance.adjustment_id])
    for adj_id in slip.adjustment_ids:
        assert repos.payroll_adjustments.get_by_id(adj_id).document_id == slip.slip_id


def test_one_slip_per_staff_and_period(payroll, repos, fixed_now):
    payroll.payroll_generator.generate_payroll(PERIOD, now=fixed_now)

    again = payroll.payroll_generator.generate_payroll(PERIOD, now=fixed_now)

    assert again.generated == 0
    assert again.skipped == ["t1"]
    assert len(repos.slips.all()) == 1
    assert payroll.payroll_generator.generate_for_staff("t1", PERIOD, now=fixed_now) is None


def test_base_salary_is_snapshotted(payroll, repos, fixed_now):
    slip = payroll.payroll_generator.generate_for_staff("t1", PERIOD, now=fixed_now)
    repos.staff.put("t1", "Nadia", 45000)

    assert repos.slips.get_by_id(slip.slip_id).base_salary == Decimal("30000")
    assert payroll.payroll_lifecycle.refresh_slip(slip.slip_id).base_salary == Decimal("30000")


def test_selected_staff_and_unknown_ids(payroll, repos, fixed_now):
    repos.staff.put("t2", "Omar", 24000)

    result = payroll.payroll_generator.generate_payroll(PERIOD, ["t2", "ghost"], now=fixed_now)

    assert result.generated == 1
    assert [f.entity_id for f in result.failures] == ["ghost"]
    assert [s.staff_id for s in repos.slips.all()] == ["t2"]


def test_inactive_staff_skipped_in_full_run(payroll, repos, fixed_now):
    repos.staff.put("t2", "Omar", 24000, status=PersonStatus.INACTIVE)

    result = payroll.payroll_generator.generate_payroll(PERIOD, now=fixed_now)

    assert [s.staff_id for s in repos.slips.all()] == ["t1"]
    assert result.generated == 1


def test_failed_apply_leaves_no_slip_and_no_applied_adjustments(payroll, repos, fixed_now):
    first = payroll.payroll_adjustments.record_pending(owner_id="t1", type="Bonus", amount="100", description="a")
    second = payroll.payroll_adjustments.record_pending(owner_id="t1", type="Fine", amount="50", description="b")
    repos.payroll_adjustments.fail_update_for.add(second.adjustment_id)

    result = payroll.payroll_generator.generate_payroll(PERIOD, now=fixed_now)

    assert result.generated == 0
    assert [f.entity_id for f in result.failures] == ["t1"]
    assert repos.slips.all() == []
    assert not repos.payroll_adjustments.get_by_id(first.adjustment_id).is_applied

    with pytest.raises(RuntimeError):
        payroll.payroll_generator.generate_for_staff("t1", PERIOD, now=fixed_now)


def test_generate_for_unknown_staff(payroll):
    with pytest.raises(NotFoundError):
        payroll.payroll_generator.generate_for_staff("ghost", PERIOD)
