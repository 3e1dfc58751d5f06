import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..base import Base

class Slot(Base):
    __tablename__ = "slots"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255))
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    quantity_total: Mapped[int] = mapped_column(Integer, default=1, server_default="1", nullable=False)
    start_time: Mapped[datetime.datetime | None] = mapped_column(DateTime, nullable=True)
    end_time: Mapped[datetime.datetime | None] = mapped_column(DateTime, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    event: Mapped["Event"] = relationship(back_populates="slots")
    signups: Mapped[list["Signup"]] = relationship(
        back_populates="slot", cascade="all, delete-orphan", order_by="Signup.id"
    )
