from datetime import date, datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy import String, Text, Numeric, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Training(Base):
    __tablename__ = "trainings"

    training_id: Mapped[int] = mapped_column(primary_key=True)
    training_name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    trainer_name: Mapped[str | None] = mapped_column(String(100))
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    location: Mapped[str | None] = mapped_column(String(200))

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now(), onupdate=sa.func.now())


class EmployeeTraining(Base):
    __tablename__ = "employee_trainings"
    __table_args__ = (UniqueConstraint("employee_id", "training_id"),)

    employee_training_id: Mapped[int] = mapped_column(primary_key=True)
    employee_id: Mapped[int | None] = mapped_column(
        ForeignKey("employees.employee_id", ondelete="CASCADE"), index=True
    )
    training_id: Mapped[int | None] = mapped_column(
        ForeignKey("trainings.training_id", ondelete="CASCADE"), index=True
    )
    participation_date: Mapped[date] = mapped_column(Date, nullable=False)
    score: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    feedback: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now(), onupdate=sa.func.now())
