from datetime import date, datetime, time
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy import String, Numeric, Date, DateTime, Time, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

# Only these statuses carry clock-in/clock-out times
CLOCKED_STATUSES = ("present", "late")


class Attendance(Base):
    __tablename__ = "attendances"
    __table_args__ = (Index("idx_attendances_employee_date", "employee_id", "attendance_date"),)

    attendance_id: Mapped[int] = mapped_column(primary_key=True)
    employee_id: Mapped[int | None] = mapped_column(ForeignKey("employees.employee_id", ondelete="CASCADE"))
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.project_id", ondelete="SET NULL"), index=True
    )
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)
    check_in_time: Mapped[time | None] = mapped_column(Time)
    check_out_time: Mapped[time | None] = mapped_column(Time)
    status: Mapped[str] = mapped_column(String(20), server_default="present", default="present")
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), server_default="0", default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now(), onupdate=sa.func.now())
