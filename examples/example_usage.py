"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; business rules live in the services.
"""

import importlib
from datetime import date

from hrms.config import get_settings_module
from hrms.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    employee = container.employee_service.list_all()[0]
    print(container.attendance_service.history(employee.employee_id)[:5])
    print(container.attendance_service.monthly_stats(employee.employee_id, date.today().strftime("%Y-%m")).as_dict())


if __name__ == "__main__":
    main()
