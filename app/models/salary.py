from datetime import date, datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy import Numeric, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Salary(Base):
    __tablename__ = "salaries"
    __table_args__ = (Index("idx_salaries_employee_id", "employee_id"),)

    salary_id: Mapped[int] = mapped_column(primary_key=True)
    # One salary row per employee
    employee_id: Mapped[int | None] = mapped_column(
        ForeignKey("employees.employee_id", ondelete="CASCADE"), unique=True
    )
    basic_salary: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    bonus: Mapped[Decimal] = mapped_column(Numeric(10, 2), server_default="0")
    allowances: Mapped[Decimal] = mapped_column(Numeric(10, 2), server_default="0")
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now(), onupdate=sa.func.now())
