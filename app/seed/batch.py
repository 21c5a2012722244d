import logging
from itertools import islice
from typing import Any, Iterable, Iterator, NamedTuple

from sqlalchemy import Column, Table, insert
from sqlalchemy.engine import Connection

logger = logging.getLogger(__name__)

Row = dict[str, Any]


def chunked(rows: Iterable[Row], size: int) -> Iterator[list[Row]]:
    """Consecutive lists of at most ``size`` rows; consumes ``rows`` lazily."""
    if size < 1:
        raise ValueError("batch size must be >= 1")
    it = iter(rows)
    while True:
        chunk = list(islice(it, size))
        if not chunk:
            return
        yield chunk


class LoadResult(NamedTuple):
    rows: int
    batches: int
    ids: tuple[int, ...] = ()


class BatchLoader:
    """
    Insert rows chunk by chunk, one multi-row INSERT per chunk.

    Runs on the caller's connection and never commits; a failing chunk raises
    and the enclosing transaction is expected to roll back.
    """

    def __init__(self, conn: Connection, batch_size: int):
        if batch_size < 1:
            raise ValueError("batch size must be >= 1")
        self.conn = conn
        self.batch_size = batch_size

    def insert(
        self,
        table: Table,
        rows: Iterable[Row],
        *,
        returning: Column | None = None,
        label: str | None = None,
    ) -> LoadResult:
        label = label or table.name
        stmt = insert(table)
        if returning is not None:
            # ids come back in the same order as the parameter rows
            stmt = stmt.returning(returning, sort_by_parameter_order=True)

        total = 0
        batches = 0
        ids: list[int] = []
        for chunk in chunked(rows, self.batch_size):
            result = self.conn.execute(
                stmt.execution_options(insertmanyvalues_page_size=len(chunk)),
                chunk,
            )
            if returning is not None:
                ids.extend(result.scalars().all())
            total += len(chunk)
            batches += 1
            logger.debug(
                "Inserted batch %d of %s (%d rows)",
                batches,
                label,
                len(chunk),
                extra={"meta": {"table": table.name, "batch": batches, "rows_so_far": total}},
            )

        return LoadResult(rows=total, batches=batches, ids=tuple(ids))
