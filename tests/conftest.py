from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

import pytest
from werkzeug.security import generate_password_hash

from hrms.attendance.model import AttendanceRecord
from hrms.audit.model import AuditLogEntry
from hrms.core.enums import AttendanceStatus, AuditAction, LeaveStatus, LeaveType, Role
from hrms.core.exceptions import DuplicateRecord
from hrms.employees.model import Employee
from hrms.leaves.model import LeaveApproval, LeaveRequest, PendingLeave
from hrms.payroll.model import PayrollRecord
from hrms.users.model import User


class InMemoryStore:
    """Tables as dicts keyed by id. Snapshots give the fake unit of work real rollback."""

    TABLES = ("users", "employees", "attendance", "leaves", "approvals", "audit", "payroll")

    def __init__(self):
        for t in self.TABLES:
            setattr(self, t, {})
        self._last_id = 0
        self._tick = datetime(2025, 1, 1, 0, 0, 0)
        self.commits = 0
        self.fail_on_leave_day: Optional[date] = None

    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def now(self) -> datetime:
        self._tick += timedelta(seconds=1)
        return self._tick

    def snapshot(self) -> dict:
        return {t: dict(getattr(self, t)) for t in self.TABLES}

    def restore(self, snap: dict) -> None:
        for t, rows in snap.items():
            setattr(self, t, dict(rows))

    # Direct seeding helpers (bypass services).
    def add_user(self, email: str, *, role: Role = Role.EMPLOYEE, password: str = "secret123", is_active: bool = True) -> User:
        user = User(
            user_id=self.next_id(),
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            is_active=is_active,
        )
        self.users[user.user_id] = user
        return user

    def add_employee(self, email: str, *, role: Role = Role.EMPLOYEE, first_name: str = "Jane", last_name: str = "Doe") -> Employee:
        user = self.add_user(email, role=role)
        employee = Employee(employee_id=self.next_id(), user_id=user.user_id, first_name=first_name, last_name=last_name)
        self.employees[employee.employee_id] = employee
        return employee

    def add_leave(self, employee_id: int, start: date, end: date, *, status: LeaveStatus = LeaveStatus.PENDING) -> LeaveRequest:
        leave = LeaveRequest(
            leave_id=self.next_id(),
            employee_id=employee_id,
            leave_type=LeaveType.PAID,
            start_date=start,
            end_date=end,
            reason=None,
            status=status,
            created_at=self.now(),
        )
        self.leaves[leave.leave_id] = leave
        return leave

    def attendance_for(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self.attendance.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def audit_entries(self, action: Optional[AuditAction] = None) -> list[AuditLogEntry]:
        rows = sorted(self.audit.values(), key=lambda e: e.audit_id)
        return [e for e in rows if action is None or e.action == action]


class InMemoryUsers:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, user_id):
        return self._s.users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self._s.users.values() if u.email == email), None)

    def create_user(self, *, email, password_hash, role):
        if self.get_by_email(email):
            raise DuplicateRecord("Email is already registered")
        user = User(user_id=self._s.next_id(), email=email, password_hash=password_hash, role=Role(role))
        self._s.users[user.user_id] = user
        return user.user_id

    def set_active(self, user_id, *, is_active):
        user = self._s.users.get(int(user_id))
        if not user:
            return False
        self._s.users[user.user_id] = replace(user, is_active=is_active)
        return True


class InMemoryEmployees:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, employee_id, *, for_update=False):
        return self._s.employees.get(int(employee_id))

    def get_by_user_id(self, user_id):
        return next((e for e in self._s.employees.values() if e.user_id == int(user_id)), None)

    def create_employee(self, *, user_id, first_name, last_name, department=None, designation=None, phone=None, joining_date=None):
        if self.get_by_user_id(user_id):
            raise DuplicateRecord("User already has an employee profile")
        employee = Employee(
            employee_id=self._s.next_id(),
            user_id=int(user_id),
            first_name=first_name,
            last_name=last_name,
            department=department,
            designation=designation,
            phone=phone,
            joining_date=joining_date or date(2025, 1, 1),
        )
        self._s.employees[employee.employee_id] = employee
        return employee.employee_id

    def update_profile(self, *, employee_id, department, designation, phone):
        employee = self._s.employees.get(int(employee_id))
        if not employee:
            return False
        self._s.employees[employee.employee_id] = replace(
            employee, department=department, designation=designation, phone=phone
        )
        return True

    def list_all(self):
        return sorted(self._s.employees.values(), key=lambda e: (e.last_name, e.first_name))


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _save(self, record: AttendanceRecord) -> AttendanceRecord:
        self._s.attendance[record.attendance_id] = record
        return record

    def _upsert(self, employee_id: int, work_date: date, **changes) -> AttendanceRecord:
        existing = self._s.attendance_for(int(employee_id), work_date)
        if existing:
            return self._save(replace(existing, **changes))
        base = dict(check_in_time=None, check_out_time=None, status=AttendanceStatus.ABSENT)
        base.update(changes)
        return self._save(
            AttendanceRecord(attendance_id=self._s.next_id(), employee_id=int(employee_id), work_date=work_date, **base)
        )

    def get_for_employee_and_date(self, employee_id, work_date):
        return self._s.attendance_for(int(employee_id), work_date)

    def list_for_employee(self, employee_id, *, start_date=None, end_date=None):
        rows = [
            r
            for r in self._s.attendance.values()
            if r.employee_id == int(employee_id)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)

    def upsert_checkin(self, *, employee_id, work_date, check_in_time, status):
        return self._upsert(
            employee_id,
            work_date,
            check_in_time=check_in_time,
            status=status,
            overridden_by=None,
            override_reason=None,
        )

    def update_checkout(self, *, attendance_id, check_out_time, status):
        record = self._s.attendance[int(attendance_id)]
        return self._save(replace(record, check_out_time=check_out_time, status=status))

    def upsert_override(self, *, employee_id, work_date, status, overridden_by, override_reason):
        return self._upsert(
            employee_id, work_date, status=status, overridden_by=overridden_by, override_reason=override_reason
        )

    def upsert_status(self, *, employee_id, work_date, status):
        if self._s.fail_on_leave_day == work_date:
            raise RuntimeError("simulated store failure")
        return self._upsert(employee_id, work_date, status=status)


class InMemoryLeaves:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _with_approvals(self, leave: LeaveRequest) -> LeaveRequest:
        approvals = sorted(
            (a for a in self._s.approvals.values() if a.leave_id == leave.leave_id),
            key=lambda a: a.created_at,
        )
        return replace(leave, approvals=tuple(approvals))

    def create_leave(self, *, employee_id, leave_type, start_date, end_date, reason):
        leave = LeaveRequest(
            leave_id=self._s.next_id(),
            employee_id=int(employee_id),
            leave_type=LeaveType(leave_type),
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=LeaveStatus.PENDING,
            created_at=self._s.now(),
        )
        self._s.leaves[leave.leave_id] = leave
        return leave.leave_id

    def get_by_id(self, leave_id, *, for_update=False):
        leave = self._s.leaves.get(int(leave_id))
        return self._with_approvals(leave) if leave else None

    def find_overlapping(self, *, employee_id, start_date, end_date, statuses: Iterable[LeaveStatus]):
        wanted = set(statuses)
        for leave in sorted(self._s.leaves.values(), key=lambda r: r.start_date):
            if leave.employee_id == int(employee_id) and leave.status in wanted and leave.overlaps(start_date, end_date):
                return leave
        return None

    def list_for_employee(self, employee_id):
        rows = [r for r in self._s.leaves.values() if r.employee_id == int(employee_id)]
        rows.sort(key=lambda r: (r.created_at, r.leave_id), reverse=True)
        return [self._with_approvals(r) for r in rows]

    def list_pending(self):
        rows = [r for r in self._s.leaves.values() if r.status == LeaveStatus.PENDING]
        rows.sort(key=lambda r: (r.created_at, r.leave_id), reverse=True)
        out = []
        for r in rows:
            employee = self._s.employees[r.employee_id]
            user = self._s.users[employee.user_id]
            out.append(PendingLeave(leave=r, employee_name=employee.full_name, employee_email=user.email))
        return out

    def transition_status(self, *, leave_id, from_status, to_status):
        leave = self._s.leaves.get(int(leave_id))
        if not leave or leave.status != from_status:
            return False
        self._s.leaves[leave.leave_id] = replace(leave, status=to_status)
        return True

    def add_approval(self, *, leave_id, approved_by, comments):
        for a in self._s.approvals.values():
            if a.leave_id == int(leave_id) and a.approved_by == int(approved_by):
                raise DuplicateRecord("This approver has already approved the leave request")
        approval = LeaveApproval(
            approval_id=self._s.next_id(),
            leave_id=int(leave_id),
            approved_by=int(approved_by),
            comments=comments,
            created_at=self._s.now(),
        )
        self._s.approvals[approval.approval_id] = approval
        return approval


class InMemoryAudit:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def append(self, *, action, actor_user_id, entity_type, entity_id, reason=None, changes=None):
        entry = AuditLogEntry(
            audit_id=self._s.next_id(),
            action=AuditAction(action),
            actor_user_id=int(actor_user_id),
            entity_type=entity_type,
            entity_id=int(entity_id),
            reason=reason,
            changes=changes,
            created_at=self._s.now(),
        )
        self._s.audit[entry.audit_id] = entry
        return entry.audit_id

    def list_for_entity(self, *, entity_type, entity_id):
        return [e for e in self._s.audit_entries() if e.entity_type == entity_type and e.entity_id == int(entity_id)]


class InMemoryPayroll:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create_payroll(self, *, employee_id, month, base_salary, allowances, deductions, net_salary, effective_date):
        if self.get_for_month(employee_id, month):
            raise DuplicateRecord("Payroll already exists")
        record = PayrollRecord(
            payroll_id=self._s.next_id(),
            employee_id=int(employee_id),
            month=month,
            base_salary=base_salary,
            allowances=allowances,
            deductions=deductions,
            net_salary=net_salary,
            effective_date=effective_date,
        )
        self._s.payroll[record.payroll_id] = record
        return record.payroll_id

    def get_for_month(self, employee_id, month):
        return next(
            (p for p in self._s.payroll.values() if p.employee_id == int(employee_id) and p.month == month),
            None,
        )

    def list_for_employee(self, employee_id):
        rows = [p for p in self._s.payroll.values() if p.employee_id == int(employee_id)]
        return sorted(rows, key=lambda p: p.month, reverse=True)


class InMemoryUnitOfWork:
    def __init__(self, store: InMemoryStore):
        self._store = store
        self._snapshot: Optional[dict] = None
        self.committed = False

    def __enter__(self):
        self._snapshot = self._store.snapshot()
        self.committed = False
        self.users = InMemoryUsers(self._store)
        self.employees = InMemoryEmployees(self._store)
        self.attendance = InMemoryAttendance(self._store)
        self.leaves = InMemoryLeaves(self._store)
        self.audit = InMemoryAudit(self._store)
        self.payroll = InMemoryPayroll(self._store)
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None or not self.committed:
            self.rollback()

    def commit(self):
        self._snapshot = self._store.snapshot()
        self.committed = True
        self._store.commits += 1

    def rollback(self):
        if self._snapshot is not None:
            self._store.restore(self._snapshot)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow_factory(store):
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 3, 9, 0, 0)


@pytest.fixture
def employee(store) -> Employee:
    return store.add_employee("jane@example.com")


@pytest.fixture
def admin(store) -> Employee:
    """An admin account that also has an employee profile."""
    return store.add_employee("admin@example.com", role=Role.ADMIN, first_name="Ada", last_name="Admin")
