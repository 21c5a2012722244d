from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from app.db.session import get_db
from app.models.employee import Employee
from app.schemas.employee import EmployeeDetailOut, EmployeeOut, EmployeeStatus
from app.schemas.pagination import PaginatedResponse, PaginationMeta

router = APIRouter(prefix="/employees", tags=["employees"])


def employee_to_out(e: Employee) -> EmployeeOut:
    return EmployeeOut(
        employee_id=e.employee_id,
        first_name=e.first_name,
        last_name=e.last_name,
        email=e.email,
        phone=e.phone,
        hire_date=e.hire_date,
        department_id=e.department_id,
        position_id=e.position_id,
        manager_id=e.manager_id,
        status=e.status,
    )


@router.get("")
def list_employees(
    search: str | None = Query(default=None, description="Search by name or email"),
    department_id: int | None = Query(default=None, description="Filter by department"),
    status: EmployeeStatus | None = Query(default=None, description="Filter by status (active, resigned, on_leave, inactive)"),
    limit: int = Query(default=100, ge=1, le=500, description="Maximum number of results"),
    offset: int = Query(default=0, ge=0, description="Number of results to skip"),
    include_pagination: bool = Query(default=False, description="Include pagination metadata"),
    db: Session = Depends(get_db),
):
    """
    List employees with optional search, filters and pagination.

    Use ?include_pagination=true to get pagination metadata.
    """
    query = db.query(Employee)

    if search:
        search_term = f"%{search.lower()}%"
        query = query.filter(
            (Employee.first_name.ilike(search_term))
            | (Employee.last_name.ilike(search_term))
            | (Employee.email.ilike(search_term))
        )
    if department_id is not None:
        query = query.filter(Employee.department_id == department_id)
    if status:
        query = query.filter(Employee.status == status)

    # Get total count before pagination
    total = query.count()

    employees = query.order_by(Employee.employee_id.asc()).offset(offset).limit(limit).all()
    items = [employee_to_out(e) for e in employees]

    if include_pagination:
        return PaginatedResponse(
            items=items,
            pagination=PaginationMeta(
                total=total,
                limit=limit,
                offset=offset,
                has_more=(offset + len(items) < total),
            ),
        )
    return items


@router.get("/{employee_id}", response_model=EmployeeDetailOut)
def get_employee(employee_id: int, db: Session = Depends(get_db)):
    employee = (
        db.query(Employee)
        .options(
            joinedload(Employee.department),
            joinedload(Employee.position),
            joinedload(Employee.manager),
        )
        .filter(Employee.employee_id == employee_id)
        .one_or_none()
    )
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")

    return EmployeeDetailOut(
        **employee_to_out(employee).model_dump(),
        department_name=employee.department.department_name if employee.department else None,
        position_name=employee.position.position_name if employee.position else None,
        manager_name=employee.manager.full_name if employee.manager else None,
    )
