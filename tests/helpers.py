from datetime import date

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app.models.department import Department
from app.models.employee import Employee
from app.models.position import Position


def make_sqlite_engine():
    """
    In-memory SQLite shared across threads (TestClient runs handlers in a worker thread).

    pysqlite's own transaction handling breaks SAVEPOINT and transactional DDL;
    turn it off and emit BEGIN ourselves.
    """
    engine = create_engine(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _no_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def create_department(db: Session, name: str, location: str | None = None, manager: Employee | None = None) -> Department:
    d = Department(department_name=name, location=location, manager_id=(manager.employee_id if manager else None))
    db.add(d)
    db.commit()
    db.refresh(d)
    return d


def create_position(db: Session, name: str = "Engineer", level: str = "P4") -> Position:
    p = Position(position_name=name, level=level)
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


def create_employee(
    db: Session,
    first_name: str,
    last_name: str,
    email: str | None = None,
    *,
    status: str = "active",
    department: Department | None = None,
    position: Position | None = None,
    manager: Employee | None = None,
    hire_date: date = date(2022, 3, 1),
) -> Employee:
    e = Employee(
        first_name=first_name,
        last_name=last_name,
        email=email or f"{last_name}.{first_name}@example.com".lower(),
        hire_date=hire_date,
        status=status,
        department_id=(department.department_id if department else None),
        position_id=(position.position_id if position else None),
        manager_id=(manager.employee_id if manager else None),
    )
    db.add(e)
    db.commit()
    db.refresh(e)
    return e
