"""Example: run a billing cycle through the service layer (no Flask).

Usage: python examples/example_usage.py 2024-01
"""

import importlib
import sys

from config import get_settings_module

from src.schoolflow.schoolflow.container import build_container


def main():
    period = sys.argv[1] if len(sys.argv) > 1 else "2024-01"
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    invoices = container.invoice_generator.generate_invoices(period)
    print("invoices:", invoices.as_dict())

    payroll = container.payroll_generator.generate_payroll(period)
    print("payroll:", payroll.as_dict())

    for slip in container.payroll_lifecycle.list_slips(period):
        print(f"  {slip.staff_name}: net {slip.net_salary} ({slip.status.value})")


if __name__ == "__main__":
    main()
