"""HRMS core package.

Organised by feature modules (users, employees, attendance, leaves, payroll)
with a thin Flask controller layer over service/repository layers. All writes
go through a unit of work so multi-row changes commit or roll back together.
"""
