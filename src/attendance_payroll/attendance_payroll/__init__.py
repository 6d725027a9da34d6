"""Attendance adjudication and payroll deduction engine.

This package is organized by feature modules (shifts, attendance, violations,
leave, payroll, ...) with pure service code at the core, repositories at the
edges and a thin Flask controller layer on top.
"""
