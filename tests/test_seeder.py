import logging
import random
from collections import Counter
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import func, select

from app.core.errors import SeedError
from app.db.schema import initialize_schema
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
from app.models.project import ONGOING_PROJECT_STATUSES
from app.seed import seeder
from app.seed.seeder import (
    EmployeeRef,
    ProjectRef,
    SeedConfig,
    backfill_rows,
    candidate_pool,
    plan_project_links,
    plan_training_links,
    run_seed,
)
from tests.helpers import make_sqlite_engine

AS_OF = date(2024, 6, 28)

ALL_TABLES = (
    Department,
    Position,
    Employee,
    Salary,
    Project,
    EmployeeProject,
    Attendance,
    Training,
    EmployeeTraining,
)


def small_config(**overrides) -> SeedConfig:
    values = dict(
        department_count=5,
        manager_count=5,
        total_employees=25,
        attendance_window_days=14,
        target_rows=0,
        as_of=AS_OF,
    )
    values.update(overrides)
    return SeedConfig(**values)


def count_rows(conn, model) -> int:
    return conn.execute(select(func.count()).select_from(model.__table__)).scalar_one()


@pytest.fixture()
def seeded(fresh_engine):
    run = run_seed(fresh_engine, small_config(), random.Random(42))
    return fresh_engine, run


# ---------- config ----------

@pytest.mark.parametrize(
    "overrides",
    [
        {"department_count": 0},
        {"department_count": 8},
        {"manager_count": 0},
        {"total_employees": 3},
        {"target_rows": -1},
        {"as_of": date(2022, 12, 31)},
    ],
)
def test_seed_config_rejects_invalid_values(overrides):
    with pytest.raises(ValueError):
        small_config(**overrides)


def test_seed_config_accepts_history_start_as_of():
    config = small_config(as_of=date(2023, 1, 1))
    assert config.as_of == config.history_start


def test_seed_config_defaults():
    config = SeedConfig()
    assert config.total_employees == 10_000
    assert config.manager_count == 5
    assert config.department_count == 7
    assert config.target_rows == 100_000
    assert config.attendance_batch_size == 1000


# ---------- end to end ----------

def test_seed_counts(seeded):
    engine, run = seeded
    with engine.connect() as conn:
        assert count_rows(conn, Department) == 5
        assert count_rows(conn, Position) == 10
        assert count_rows(conn, Employee) == 25
        assert count_rows(conn, Salary) == 25
        assert count_rows(conn, Project) == 8
        assert count_rows(conn, Training) == 8
        actual = {model.__tablename__: count_rows(conn, model) for model in ALL_TABLES}

    assert {table: n for table, n in actual.items() if n} == {table: n for table, n in run.counts.items() if n}
    assert run.total_rows == sum(actual.values())
    assert len(run.managers) == 5
    assert len(run.staff) == 20


def test_every_department_has_a_manager(seeded):
    engine, run = seeded
    with engine.connect() as conn:
        manager_ids = conn.execute(select(Department.manager_id)).scalars().all()
        existing = set(conn.execute(select(Employee.employee_id)).scalars())

    assert len(manager_ids) == 5
    assert all(mid in existing for mid in manager_ids)
    # five managers round-robined over five departments
    assert sorted(manager_ids) == sorted(run.manager_ids)


def test_manager_hierarchy(seeded):
    engine, run = seeded
    with engine.connect() as conn:
        rows = conn.execute(select(Employee.employee_id, Employee.manager_id, Employee.position_id)).all()

    by_id = {r.employee_id: r for r in rows}
    for manager_id in run.manager_ids:
        assert by_id[manager_id].manager_id is None
        assert by_id[manager_id].position_id in run.positions.manager_ids
    for ref in run.staff:
        assert by_id[ref.employee_id].manager_id in run.manager_ids
        assert by_id[ref.employee_id].position_id in run.positions.staff_ids


def test_employee_statuses_and_emails(seeded):
    engine, run = seeded
    with engine.connect() as conn:
        rows = conn.execute(select(Employee.employee_id, Employee.status, Employee.email)).all()

    statuses = {r.employee_id: r.status for r in rows}
    assert all(statuses[m] == "active" for m in run.manager_ids)
    assert {ref.employee_id: ref.status for ref in run.employees} == statuses
    assert all(r.email.endswith("@example.com") for r in rows)


def test_salary_ranges(seeded):
    engine, _ = seeded
    with engine.connect() as conn:
        salaries = conn.execute(select(Salary.__table__)).all()

    for s in salaries:
        assert 8000 <= s.basic_salary < 28_000
        assert 1000 <= s.allowances < 6000
        basic = float(s.basic_salary)
        assert basic * 0.10 - 1 <= float(s.bonus) <= basic * 0.40
        assert date(2023, 1, 1) <= s.effective_date <= AS_OF


def test_project_links_are_unique_and_cover_active_employees(seeded):
    engine, run = seeded
    with engine.connect() as conn:
        links = conn.execute(select(EmployeeProject.employee_id, EmployeeProject.project_id)).all()

    pairs = [tuple(link) for link in links]
    assert len(pairs) == len(set(pairs))

    project_status = {p.project_id: p.status for p in run.projects}
    employee_status = {e.employee_id: e.status for e in run.employees}
    for employee_id, project_id in pairs:
        if project_status[project_id] in ONGOING_PROJECT_STATUSES:
            assert employee_status[employee_id] == "active"

    if any(p.status in ONGOING_PROJECT_STATUSES for p in run.projects):
        linked = {employee_id for employee_id, project_id in pairs if project_status[project_id] in ONGOING_PROJECT_STATUSES}
        active = {e.employee_id for e in run.employees if e.status == "active"}
        assert active <= linked


def test_attendance_rows(seeded):
    engine, run = seeded
    window = {AS_OF - timedelta(days=d) for d in range(14)}
    with engine.connect() as conn:
        rows = conn.execute(select(Attendance.__table__)).all()

    assert rows
    per_day = Counter((r.employee_id, r.attendance_date) for r in rows)
    assert max(per_day.values()) == 1

    project_ids = {p.project_id for p in run.projects}
    for r in rows:
        assert r.attendance_date in window
        assert r.attendance_date.weekday() < 5
        assert r.project_id is None or r.project_id in project_ids
        if r.status in ("present", "late"):
            assert r.check_in_time < r.check_out_time
            worked = datetime.combine(AS_OF, r.check_out_time) - datetime.combine(AS_OF, r.check_in_time)
            assert timedelta(hours=8) <= worked <= timedelta(hours=10)
        else:
            assert r.check_in_time is None and r.check_out_time is None
            assert r.overtime_hours == 0


def test_training_links(seeded):
    engine, run = seeded
    with engine.connect() as conn:
        links = conn.execute(select(EmployeeTraining.__table__)).all()

    pairs = [(t.employee_id, t.training_id) for t in links]
    assert len(pairs) == len(set(pairs))
    per_training = Counter(training_id for _, training_id in pairs)
    assert set(per_training) == set(run.training_ids)
    assert all(10 <= n <= 20 for n in per_training.values())
    assert all(t.score is None or 70 <= t.score < 100 for t in links)


def test_seed_is_reproducible(fresh_engine):
    other = make_sqlite_engine()
    initialize_schema(other)
    try:
        first = run_seed(fresh_engine, small_config(), random.Random(7))
        second = run_seed(other, small_config(), random.Random(7))
    finally:
        other.dispose()

    assert first.counts == second.counts
    assert [e.status for e in first.employees] == [e.status for e in second.employees]
    assert [p.status for p in first.projects] == [p.status for p in second.projects]


# ---------- backfill ----------

def test_backfill_reaches_target(fresh_engine):
    run = run_seed(fresh_engine, small_config(target_rows=2000), random.Random(3))
    assert run.total_rows == 2000

    with fresh_engine.connect() as conn:
        total = sum(count_rows(conn, model) for model in ALL_TABLES)
        dates = conn.execute(select(Attendance.employee_id, Attendance.attendance_date)).all()
    assert total == 2000
    per_day = Counter(tuple(d) for d in dates)
    assert max(per_day.values()) == 1


def test_backfill_skipped_when_target_met(fresh_engine):
    run = run_seed(fresh_engine, small_config(target_rows=10), random.Random(3))
    with fresh_engine.connect() as conn:
        oldest = conn.execute(select(func.min(Attendance.attendance_date))).scalar_one()
    assert oldest >= AS_OF - timedelta(days=13)
    assert run.total_rows > 10


def test_backfill_rows_precede_window():
    config = small_config()
    rows = backfill_rows(random.Random(1), config, (1, 2, 3), (10,))
    first = [next(rows) for _ in range(30)]
    cutoff = AS_OF - timedelta(days=config.attendance_window_days - 1)
    assert all(r["attendance_date"] < cutoff for r in first)
    assert all(r["attendance_date"].weekday() < 5 for r in first)
    assert len({(r["employee_id"], r["attendance_date"]) for r in first}) == 30


# ---------- project / training planning ----------

def test_candidate_pool_by_project_status():
    employees = (
        EmployeeRef(1, "active"),
        EmployeeRef(2, "resigned"),
        EmployeeRef(3, "on_leave"),
        EmployeeRef(4, "active"),
    )
    for status in ONGOING_PROJECT_STATUSES:
        assert candidate_pool(status, employees) == [1, 4]
    assert candidate_pool("completed", employees) == [1, 2, 3, 4]


def test_plan_project_links_repairs_unlinked_employees():
    employees = tuple(EmployeeRef(i, "active") for i in range(1, 41))
    projects = (ProjectRef(100, "active"), ProjectRef(101, "completed"))

    rows = plan_project_links(random.Random(11), small_config(), employees, projects)

    pairs = [(r["employee_id"], r["project_id"]) for r in rows]
    assert len(pairs) == len(set(pairs))
    ongoing_members = {e for e, p in pairs if p == 100}
    assert ongoing_members == {e.employee_id for e in employees}
    assert all(r["end_date"] is not None for r in rows if r["project_id"] == 101)


def test_plan_project_links_warns_without_ongoing_project(caplog):
    employees = tuple(EmployeeRef(i, "active") for i in range(1, 31))
    projects = (ProjectRef(100, "completed"),)

    with caplog.at_level(logging.WARNING, logger="app.seed.seeder"):
        rows = plan_project_links(random.Random(5), small_config(), employees, projects)

    assert 5 <= len(rows) <= 8
    assert "No ongoing project" in caplog.text


def test_plan_training_links_caps_participants():
    rows = plan_training_links(random.Random(2), small_config(), tuple(range(1, 8)), (1, 2))
    per_training = Counter(r["training_id"] for r in rows)
    assert per_training == {1: 7, 2: 7}


# ---------- failure ----------

def test_failure_rolls_back_everything(fresh_engine, monkeypatch):
    def broken_trainings(conn, rng, config):
        raise RuntimeError("trainings unavailable")

    monkeypatch.setattr(seeder, "insert_trainings", broken_trainings)

    with pytest.raises(SeedError) as excinfo:
        run_seed(fresh_engine, small_config(), random.Random(1))

    err = excinfo.value
    assert err.phase == "trainings"
    assert err.rows_inserted > 0
    assert isinstance(err.cause, RuntimeError)

    with fresh_engine.connect() as conn:
        assert all(count_rows(conn, model) == 0 for model in ALL_TABLES)
