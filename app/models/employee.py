from datetime import date, datetime

import sqlalchemy as sa
from sqlalchemy import String, Text, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (Index("idx_employees_email", "email"),)

    employee_id: Mapped[int] = mapped_column(primary_key=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20))
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)

    department_id: Mapped[int | None] = mapped_column(
        ForeignKey("departments.department_id", ondelete="SET NULL"), index=True
    )
    position_id: Mapped[int | None] = mapped_column(
        ForeignKey("positions.position_id", ondelete="SET NULL"), index=True
    )
    # Self reference: managers are always inserted before the staff pointing at them
    manager_id: Mapped[int | None] = mapped_column(
        ForeignKey("employees.employee_id", ondelete="SET NULL"), index=True
    )

    address: Mapped[str | None] = mapped_column(Text)
    birth_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(20), server_default="active", default="active")

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now(), onupdate=sa.func.now())

    department = relationship("Department", foreign_keys=[department_id])
    position = relationship("Position")
    manager = relationship("Employee", remote_side=[employee_id], foreign_keys=[manager_id])

    @property
    def full_name(self) -> str:
        # Surname first
        return f"{self.last_name}{self.first_name}"
