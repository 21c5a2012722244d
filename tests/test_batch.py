from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.models.employee import Employee
from app.models.position import Position
from app.seed.batch import BatchLoader, chunked


def test_chunked_sizes():
    chunks = list(chunked(range(7), 3))
    assert chunks == [[0, 1, 2], [3, 4, 5], [6]]
    assert list(chunked([], 3)) == []


def test_chunked_is_lazy():
    def rows():
        yield 1
        yield 2
        raise AssertionError("read past the first chunk")

    first = next(chunked(rows(), 2))
    assert first == [1, 2]


def test_chunked_rejects_zero():
    with pytest.raises(ValueError):
        list(chunked([1], 0))


def test_batch_loader_returns_ids_in_row_order(fresh_engine):
    table = Position.__table__
    rows = [{"position_name": f"Position {i}", "level": "P1"} for i in range(10)]

    with fresh_engine.begin() as conn:
        result = BatchLoader(conn, 3).insert(table, rows, returning=table.c.position_id)
        names = dict(conn.execute(select(table.c.position_id, table.c.position_name)).all())

    assert result.rows == 10
    assert result.batches == 4
    assert len(set(result.ids)) == 10
    assert [names[pid] for pid in result.ids] == [r["position_name"] for r in rows]


def test_batch_loader_without_returning(fresh_engine):
    rows = ({"position_name": f"P{i}"} for i in range(5))
    with fresh_engine.begin() as conn:
        result = BatchLoader(conn, 2).insert(Position.__table__, rows)
    assert result == (5, 3, ())


def test_batch_loader_failure_aborts_transaction(fresh_engine):
    table = Employee.__table__
    rows = [
        {"first_name": "伟", "last_name": "张", "email": "a@example.com", "hire_date": date(2020, 1, 1)},
        {"first_name": "芳", "last_name": "王", "email": "b@example.com", "hire_date": date(2020, 1, 1)},
        {"first_name": "娜", "last_name": "李", "email": "a@example.com", "hire_date": date(2020, 1, 1)},
    ]
    with pytest.raises(IntegrityError):
        with fresh_engine.begin() as conn:
            BatchLoader(conn, 2).insert(table, rows)

    with fresh_engine.connect() as conn:
        assert conn.execute(select(table.c.employee_id)).all() == []
