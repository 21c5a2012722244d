from datetime import date
from typing import Literal

from pydantic import BaseModel

EmployeeStatus = Literal["active", "resigned", "on_leave", "inactive"]


class EmployeeOut(BaseModel):
    employee_id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None
    hire_date: date
    department_id: int | None
    position_id: int | None
    manager_id: int | None
    status: str


class EmployeeDetailOut(EmployeeOut):
    department_name: str | None
    position_name: str | None
    manager_name: str | None
