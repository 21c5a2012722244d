from app.models.attendance import Attendance
from app.models.department import Department
from app.models.employee import Employee
from app.models.position import Position
from app.models.project import EmployeeProject, Project
from app.models.salary import Salary
from app.models.training import EmployeeTraining, Training

__all__ = [
    "Attendance",
    "Department",
    "Employee",
    "EmployeeProject",
    "EmployeeTraining",
    "Position",
    "Project",
    "Salary",
    "Training",
]
