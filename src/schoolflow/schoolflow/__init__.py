"""SchoolFlow billing & payroll engine.

This package is organized by feature modules (adjustments, invoices, payroll, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
