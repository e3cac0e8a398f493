"""Payslip Calc - progressive income tax and monthly payslip calculations."""

__version__ = "1.0.0"
