from sqlalchemy import Column, Date, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from tracker.db import Base


class Goal(Base):
    __tablename__ = "goals"
    __table_args__ = (
        UniqueConstraint("metric_id", "week_start", name="uq_goals_metric_week"),
    )

    id = Column(Integer, primary_key=True, index=True)
    metric_id = Column(
        Integer, ForeignKey("metrics.id", ondelete="CASCADE"), nullable=False, index=True
    )

    target_value = Column(Float, nullable=False)
    week_start = Column(Date, nullable=False, index=True)

    metric = relationship("Metric", back_populates="goals")
