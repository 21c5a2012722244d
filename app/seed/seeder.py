"""
Seed the employee-management schema with synthetic data.

Phases run in foreign-key order inside a single transaction:

    departments -> positions -> managers -> department managers -> staff
    -> salaries -> projects -> project links -> attendance -> trainings
    -> training links -> attendance backfill

Each phase returns the ids the next phases need; nothing is kept in module
state. Any failure raises SeedError and the transaction rolls back as a whole.
"""
import logging
import random
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, timedelta
from itertools import count, islice
from typing import Iterable, Iterator, NamedTuple

from sqlalchemy import bindparam, update
from sqlalchemy.engine import Connection, Engine

from app.core.errors import SeedError
from app.core.logging import timed
from app.models import (
    Attendance,
    Department,
    Employee,
    EmployeeProject,
    EmployeeTraining,
    Position,
    Project,
    Salary,
    Training,
)
from app.models.project import ONGOING_PROJECT_STATUSES, PROJECT_STATUSES
from app.seed import catalog
from app.seed.batch import BatchLoader, Row
from app.seed.generators import (
    ATTENDANCE_STATUS_SAMPLER,
    EMPLOYEE_STATUS_SAMPLER,
    business_days,
    generate_clock_times,
    generate_email,
    generate_name,
    generate_phone,
    random_date,
)

logger = logging.getLogger(__name__)

MANAGER_HIRE_START = date(2018, 1, 1)
MANAGER_HIRE_END = date(2020, 12, 31)
STAFF_HIRE_START = date(2018, 1, 1)

ATTENDANCE_SKIP_RATE = 0.1
ATTENDANCE_PROJECT_RATE = 0.8


@dataclass(frozen=True)
class SeedConfig:
    department_count: int = len(catalog.DEPARTMENTS)
    manager_count: int = 5
    total_employees: int = 10_000
    attendance_window_days: int = 365
    # Backfill attendance until the whole run holds at least this many rows; 0 disables
    target_rows: int = 100_000

    employee_batch_size: int = 500
    salary_batch_size: int = 500
    link_batch_size: int = 500
    attendance_batch_size: int = 1000
    backfill_batch_size: int = 5000

    as_of: date = field(default_factory=date.today)
    history_start: date = date(2023, 1, 1)

    def __post_init__(self):
        if not 1 <= self.department_count <= len(catalog.DEPARTMENTS):
            raise ValueError(f"department_count must be between 1 and {len(catalog.DEPARTMENTS)}")
        if self.manager_count < 1:
            raise ValueError("manager_count must be >= 1")
        if self.total_employees < self.manager_count:
            raise ValueError("total_employees must include the managers")
        if self.attendance_window_days < 0 or self.target_rows < 0:
            raise ValueError("attendance_window_days and target_rows must be >= 0")
        if self.as_of < self.history_start:
            raise ValueError(f"as_of must not be earlier than {self.history_start.isoformat()}")


class EmployeeRef(NamedTuple):
    employee_id: int
    status: str


class ProjectRef(NamedTuple):
    project_id: int
    status: str


class PositionPool(NamedTuple):
    manager_ids: tuple[int, ...]
    staff_ids: tuple[int, ...]

    @property
    def all_ids(self) -> tuple[int, ...]:
        return self.manager_ids + self.staff_ids


@dataclass(frozen=True)
class SeedRun:
    """Everything one seed run produced."""

    department_ids: tuple[int, ...]
    positions: PositionPool
    managers: tuple[EmployeeRef, ...]
    staff: tuple[EmployeeRef, ...]
    projects: tuple[ProjectRef, ...]
    training_ids: tuple[int, ...]
    counts: dict[str, int]

    @property
    def manager_ids(self) -> tuple[int, ...]:
        return tuple(m.employee_id for m in self.managers)

    @property
    def employees(self) -> tuple[EmployeeRef, ...]:
        return self.managers + self.staff

    @property
    def employee_ids(self) -> tuple[int, ...]:
        return tuple(e.employee_id for e in self.employees)

    @property
    def total_rows(self) -> int:
        return sum(self.counts.values())


# ---------- reference data ----------

def insert_departments(conn: Connection, config: SeedConfig) -> tuple[int, ...]:
    table = Department.__table__
    rows = [dict(d) for d in catalog.DEPARTMENTS[: config.department_count]]
    return BatchLoader(conn, len(rows)).insert(table, rows, returning=table.c.department_id).ids


def insert_positions(conn: Connection) -> PositionPool:
    table = Position.__table__
    rows = [dict(p) for p in catalog.POSITIONS]
    ids = BatchLoader(conn, len(rows)).insert(table, rows, returning=table.c.position_id).ids

    manager_ids = ids[catalog.MANAGER_POSITIONS]
    staff_ids = tuple(pid for pid in ids if pid not in manager_ids)
    return PositionPool(manager_ids=tuple(manager_ids), staff_ids=staff_ids)


# ---------- employees ----------

def _employee_row(rng: random.Random, index: int, hire_start: date, hire_end: date) -> Row:
    name = generate_name(index)
    return {
        "first_name": name.given_name,
        "last_name": name.surname,
        "email": generate_email(name, index + 1, rng),
        "phone": generate_phone(rng),
        "hire_date": random_date(rng, hire_start, hire_end),
    }


def insert_managers(
    conn: Connection,
    rng: random.Random,
    config: SeedConfig,
    department_ids: tuple[int, ...],
    positions: PositionPool,
) -> tuple[EmployeeRef, ...]:
    """Managers come first so every later employee can point at one of them."""
    table = Employee.__table__
    rows = []
    for i in range(config.manager_count):
        row = _employee_row(rng, i, MANAGER_HIRE_START, MANAGER_HIRE_END)
        row.update(
            department_id=rng.choice(department_ids),
            position_id=rng.choice(positions.manager_ids),
            manager_id=None,
            status="active",
        )
        rows.append(row)

    ids = BatchLoader(conn, config.employee_batch_size).insert(
        table, rows, returning=table.c.employee_id, label="managers"
    ).ids
    return tuple(EmployeeRef(eid, "active") for eid in ids)


def assign_department_managers(
    conn: Connection, department_ids: tuple[int, ...], manager_ids: tuple[int, ...]
) -> int:
    """Round-robin the managers over the departments (closes the departments <-> employees cycle)."""
    table = Department.__table__
    stmt = (
        update(table)
        .where(table.c.department_id == bindparam("b_department_id"))
        .values(manager_id=bindparam("b_manager_id"))
    )
    params = [
        {"b_department_id": dept_id, "b_manager_id": manager_ids[i % len(manager_ids)]}
        for i, dept_id in enumerate(department_ids)
    ]
    conn.execute(stmt, params)
    return len(params)


def insert_staff(
    conn: Connection,
    rng: random.Random,
    config: SeedConfig,
    department_ids: tuple[int, ...],
    positions: PositionPool,
    manager_ids: tuple[int, ...],
) -> tuple[EmployeeRef, ...]:
    table = Employee.__table__
    staff_positions = positions.staff_ids or positions.all_ids
    rows = []
    for i in range(config.manager_count, config.total_employees):
        row = _employee_row(rng, i, STAFF_HIRE_START, config.as_of)
        row.update(
            department_id=rng.choice(department_ids),
            position_id=rng.choice(staff_positions),
            manager_id=rng.choice(manager_ids),
            status=EMPLOYEE_STATUS_SAMPLER.sample(rng),
        )
        rows.append(row)

    ids = BatchLoader(conn, config.employee_batch_size).insert(
        table, rows, returning=table.c.employee_id, label="staff"
    ).ids
    return tuple(EmployeeRef(eid, row["status"]) for eid, row in zip(ids, rows))


def salary_rows(rng: random.Random, config: SeedConfig, employee_ids: Iterable[int]) -> Iterator[Row]:
    for employee_id in employee_ids:
        basic = rng.randint(8000, 27_999)
        yield {
            "employee_id": employee_id,
            "basic_salary": basic,
            "bonus": int(basic * rng.uniform(0.10, 0.40)),
            "allowances": rng.randint(1000, 5999),
            "effective_date": random_date(rng, config.history_start, config.as_of),
        }


def insert_salaries(conn: Connection, rng: random.Random, config: SeedConfig, employee_ids: tuple[int, ...]) -> int:
    loader = BatchLoader(conn, config.salary_batch_size)
    return loader.insert(Salary.__table__, salary_rows(rng, config, employee_ids)).rows


# ---------- projects ----------

def insert_projects(conn: Connection, rng: random.Random, config: SeedConfig) -> tuple[ProjectRef, ...]:
    table = Project.__table__
    rows = []
    for project in catalog.PROJECTS:
        start = random_date(rng, config.history_start, config.as_of)
        rows.append(
            {
                **project,
                "start_date": start,
                "end_date": start + timedelta(days=rng.randint(30, 365)),
                "status": rng.choice(PROJECT_STATUSES),
            }
        )
    ids = BatchLoader(conn, len(rows)).insert(table, rows, returning=table.c.project_id).ids
    return tuple(ProjectRef(pid, row["status"]) for pid, row in zip(ids, rows))


def candidate_pool(project_status: str, employees: Iterable[EmployeeRef]) -> list[int]:
    """Ongoing projects only staff active employees; completed ones may list anyone."""
    if project_status in ONGOING_PROJECT_STATUSES:
        return [e.employee_id for e in employees if e.status == "active"]
    return [e.employee_id for e in employees]


def plan_project_links(
    rng: random.Random,
    config: SeedConfig,
    employees: tuple[EmployeeRef, ...],
    projects: tuple[ProjectRef, ...],
) -> list[Row]:
    status_by_employee = {e.employee_id: e.status for e in employees}
    assigned: set[tuple[int, int]] = set()
    rows: list[Row] = []

    for project in projects:
        pool = candidate_pool(project.status, employees)
        rng.shuffle(pool)
        for employee_id in pool[: rng.randint(5, 8)]:
            pair = (employee_id, project.project_id)
            if pair in assigned:
                continue
            start = random_date(rng, config.history_start, config.as_of)
            end = None
            if project.status == "completed" or status_by_employee[employee_id] == "resigned":
                end = random_date(rng, start, config.as_of)
            rows.append(
                {
                    "employee_id": employee_id,
                    "project_id": project.project_id,
                    "role": rng.choice(catalog.PROJECT_ROLES),
                    "start_date": start,
                    "end_date": end,
                    "contribution_hours": rng.randint(80, 239),
                }
            )
            assigned.add(pair)

    # Every active employee ends up on at least one ongoing project
    ongoing = [p for p in projects if p.status in ONGOING_PROJECT_STATUSES]
    ongoing_ids = {p.project_id for p in ongoing}
    linked = {employee_id for employee_id, project_id in assigned if project_id in ongoing_ids}
    unlinked = [e.employee_id for e in employees if e.status == "active" and e.employee_id not in linked]
    if unlinked and not ongoing:
        logger.warning(
            "No ongoing project to attach active employees to",
            extra={"meta": {"unlinked_active_employees": len(unlinked)}},
        )
        return rows

    for employee_id in unlinked:
        project = rng.choice(ongoing)
        rows.append(
            {
                "employee_id": employee_id,
                "project_id": project.project_id,
                "role": rng.choice(catalog.PROJECT_ROLES),
                "start_date": random_date(rng, config.history_start, config.as_of),
                "end_date": None,
                "contribution_hours": rng.randint(50, 149),
            }
        )
        assigned.add((employee_id, project.project_id))

    return rows


def insert_project_links(conn: Connection, rows: list[Row], config: SeedConfig) -> int:
    return BatchLoader(conn, config.link_batch_size).insert(EmployeeProject.__table__, rows).rows


# ---------- attendance ----------

def attendance_row(
    rng: random.Random, employee_id: int, day: date, project_ids: tuple[int, ...]
) -> Row:
    status = ATTENDANCE_STATUS_SAMPLER.sample(rng)
    clock = generate_clock_times(rng, status)
    project_id = None
    if project_ids and rng.random() < ATTENDANCE_PROJECT_RATE:
        project_id = rng.choice(project_ids)
    return {
        "employee_id": employee_id,
        "project_id": project_id,
        "attendance_date": day,
        "check_in_time": clock.check_in,
        "check_out_time": clock.check_out,
        "status": status,
        "overtime_hours": clock.overtime_hours,
    }


def attendance_rows(
    rng: random.Random,
    employee_ids: Iterable[int],
    days: list[date],
    project_ids: tuple[int, ...],
    skip_rate: float = ATTENDANCE_SKIP_RATE,
) -> Iterator[Row]:
    """At most one row per employee per day; each (employee, day) is dropped with ``skip_rate``."""
    for employee_id in employee_ids:
        for day in days:
            if rng.random() < skip_rate:
                continue
            yield attendance_row(rng, employee_id, day, project_ids)


def insert_attendance(
    conn: Connection,
    rng: random.Random,
    config: SeedConfig,
    employee_ids: tuple[int, ...],
    project_ids: tuple[int, ...],
) -> int:
    days = business_days(config.as_of, 0, config.attendance_window_days)
    logger.info("Generating attendance for %d business days", len(days), extra={"meta": {"employees": len(employee_ids)}})
    rows = attendance_rows(rng, employee_ids, days, project_ids)
    return BatchLoader(conn, config.attendance_batch_size).insert(Attendance.__table__, rows, label="attendance").rows


def backfill_rows(
    rng: random.Random,
    config: SeedConfig,
    employee_ids: tuple[int, ...],
    project_ids: tuple[int, ...],
) -> Iterator[Row]:
    """Endless attendance rows for business days older than the regular window, one per employee per day."""
    for offset in count(config.attendance_window_days):
        day = config.as_of - timedelta(days=offset)
        if day.weekday() >= 5:
            continue
        for employee_id in employee_ids:
            yield attendance_row(rng, employee_id, day, project_ids)


def backfill_attendance(
    conn: Connection,
    rng: random.Random,
    config: SeedConfig,
    employee_ids: tuple[int, ...],
    project_ids: tuple[int, ...],
    rows_so_far: int,
) -> int:
    needed = config.target_rows - rows_so_far
    if config.target_rows == 0 or needed <= 0 or not employee_ids:
        return 0

    logger.info(
        "Row count %d below target %d, backfilling attendance",
        rows_so_far,
        config.target_rows,
        extra={"meta": {"needed": needed}},
    )
    rows = islice(backfill_rows(rng, config, employee_ids, project_ids), needed)
    loader = BatchLoader(conn, config.backfill_batch_size)
    return loader.insert(Attendance.__table__, rows, label="attendance backfill").rows


# ---------- trainings ----------

def insert_trainings(conn: Connection, rng: random.Random, config: SeedConfig) -> tuple[int, ...]:
    table = Training.__table__
    rows = []
    for training in catalog.TRAININGS:
        start = random_date(rng, config.history_start, config.as_of)
        rows.append(
            {
                **training,
                "description": f"{training['training_name']} - professional skills development",
                "start_date": start,
                "end_date": start + timedelta(days=rng.randint(1, 3)),
            }
        )
    return BatchLoader(conn, len(rows)).insert(table, rows, returning=table.c.training_id).ids


def plan_training_links(
    rng: random.Random,
    config: SeedConfig,
    employee_ids: tuple[int, ...],
    training_ids: tuple[int, ...],
) -> list[Row]:
    assigned: set[tuple[int, int]] = set()
    rows: list[Row] = []
    for training_id in training_ids:
        participants = list(employee_ids)
        rng.shuffle(participants)
        for employee_id in participants[: rng.randint(10, 20)]:
            pair = (employee_id, training_id)
            if pair in assigned:
                continue
            rows.append(
                {
                    "employee_id": employee_id,
                    "training_id": training_id,
                    "participation_date": random_date(rng, config.history_start, config.as_of),
                    "score": rng.randint(70, 99) if rng.random() > 0.2 else None,
                    "feedback": catalog.TRAINING_FEEDBACK if rng.random() > 0.5 else None,
                }
            )
            assigned.add(pair)
    return rows


def insert_training_links(conn: Connection, rows: list[Row], config: SeedConfig) -> int:
    return BatchLoader(conn, config.link_batch_size).insert(EmployeeTraining.__table__, rows).rows


# ---------- orchestration ----------

class _Progress:
    def __init__(self):
        self.phase = "connect"
        self.counts: dict[str, int] = {}

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @contextmanager
    def step(self, phase: str):
        self.phase = phase
        logger.info("Seeding %s...", phase, extra={"meta": {"phase": phase}})
        with timed(f"seed: {phase}", rows_so_far=self.total):
            yield

    def record(self, table: str, rows: int):
        self.counts[table] = self.counts.get(table, 0) + rows
        logger.info(
            "Inserted %d %s rows",
            rows,
            table,
            extra={"meta": {"phase": self.phase, "table": table, "rows_so_far": self.total}},
        )


def seed_database(conn: Connection, config: SeedConfig, rng: random.Random) -> SeedRun:
    """
    Run every phase on ``conn``. The caller owns the transaction.

    Raises SeedError carrying the failing phase and the number of rows inserted
    before it.
    """
    progress = _Progress()
    try:
        with progress.step("departments"):
            department_ids = insert_departments(conn, config)
            progress.record("departments", len(department_ids))

        with progress.step("positions"):
            positions = insert_positions(conn)
            progress.record("positions", len(positions.all_ids))

        with progress.step("managers"):
            managers = insert_managers(conn, rng, config, department_ids, positions)
            progress.record("employees", len(managers))
            manager_ids = tuple(m.employee_id for m in managers)
            assign_department_managers(conn, department_ids, manager_ids)

        with progress.step("staff"):
            staff = insert_staff(conn, rng, config, department_ids, positions, manager_ids)
            progress.record("employees", len(staff))

        employees = managers + staff
        employee_ids = tuple(e.employee_id for e in employees)

        with progress.step("salaries"):
            progress.record("salaries", insert_salaries(conn, rng, config, employee_ids))

        with progress.step("projects"):
            projects = insert_projects(conn, rng, config)
            progress.record("projects", len(projects))
        project_ids = tuple(p.project_id for p in projects)

        with progress.step("project links"):
            links = plan_project_links(rng, config, employees, projects)
            progress.record("employee_projects", insert_project_links(conn, links, config))

        with progress.step("attendance"):
            progress.record("attendances", insert_attendance(conn, rng, config, employee_ids, project_ids))

        with progress.step("trainings"):
            training_ids = insert_trainings(conn, rng, config)
            progress.record("trainings", len(training_ids))

        with progress.step("training links"):
            links = plan_training_links(rng, config, employee_ids, training_ids)
            progress.record("employee_trainings", insert_training_links(conn, links, config))

        with progress.step("attendance backfill"):
            added = backfill_attendance(conn, rng, config, employee_ids, project_ids, progress.total)
            if added:
                progress.record("attendances", added)

    except Exception as exc:
        raise SeedError(progress.phase, progress.total, exc) from exc

    return SeedRun(
        department_ids=department_ids,
        positions=positions,
        managers=managers,
        staff=staff,
        projects=projects,
        training_ids=training_ids,
        counts=dict(progress.counts),
    )


def run_seed(engine: Engine, config: SeedConfig | None = None, rng: random.Random | None = None) -> SeedRun:
    """
    Seed inside one transaction: commit when every phase succeeds, roll back otherwise.

    Connection failures propagate unchanged (nothing to roll back yet).
    """
    config = config or SeedConfig()
    rng = rng or random.Random()

    with engine.connect() as conn:
        logger.info("Connected to database", extra={"meta": {"url": engine.url.render_as_string(hide_password=True)}})
        try:
            with conn.begin():
                run = seed_database(conn, config, rng)
        except SeedError as exc:
            logger.error(
                "Seeding failed, transaction rolled back",
                exc_info=exc.cause,
                extra={"meta": {"phase": exc.phase, "rows_inserted": exc.rows_inserted}},
            )
            raise

    logger.info("Seeding complete: %d rows", run.total_rows, extra={"meta": run.counts})
    return run
