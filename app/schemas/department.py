from pydantic import BaseModel


class DepartmentOut(BaseModel):
    department_id: int
    department_name: str
    location: str | None
    manager_id: int | None
    manager_name: str | None = None


class DepartmentDetailOut(DepartmentOut):
    employee_count: int
