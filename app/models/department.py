from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import String, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Department(Base):
    __tablename__ = "departments"

    department_id: Mapped[int] = mapped_column(primary_key=True)
    department_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    location: Mapped[str | None] = mapped_column(String(200))

    # Departments and employees reference each other; this FK is added once both tables exist
    manager_id: Mapped[int | None] = mapped_column(
        ForeignKey("employees.employee_id", ondelete="SET NULL", use_alter=True),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=sa.func.now(), onupdate=sa.func.now())

    manager = relationship("Employee", foreign_keys=[manager_id], post_update=True)
