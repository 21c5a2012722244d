from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.db.session import get_db
from app.models.department import Department
from app.models.employee import Employee
from app.schemas.department import DepartmentDetailOut, DepartmentOut

router = APIRouter(prefix="/departments", tags=["departments"])


def department_to_out(d: Department) -> DepartmentOut:
    return DepartmentOut(
        department_id=d.department_id,
        department_name=d.department_name,
        location=d.location,
        manager_id=d.manager_id,
        manager_name=d.manager.full_name if d.manager else None,
    )


@router.get("", response_model=list[DepartmentOut])
def list_departments(db: Session = Depends(get_db)):
    departments = (
        db.query(Department)
        .options(joinedload(Department.manager))
        .order_by(Department.department_id.asc())
        .all()
    )
    return [department_to_out(d) for d in departments]


@router.get("/{department_id}", response_model=DepartmentDetailOut)
def get_department(department_id: int, db: Session = Depends(get_db)):
    """
    Department details, including its manager and current headcount.
    """
    department = db.get(Department, department_id)
    if not department:
        raise HTTPException(status_code=404, detail="Department not found")

    employee_count = (
        db.query(func.count(Employee.employee_id))
        .filter(Employee.department_id == department_id)
        .scalar()
    )
    return DepartmentDetailOut(**department_to_out(department).model_dump(), employee_count=employee_count)
