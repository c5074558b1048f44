from sqlalchemy import Column, Date, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from tracker.db import Base


class MetricValue(Base):
    __tablename__ = "metric_values"
    __table_args__ = (
        UniqueConstraint("metric_id", "week_start", name="uq_metric_values_metric_week"),
    )

    id = Column(Integer, primary_key=True, index=True)
    metric_id = Column(
        Integer, ForeignKey("metrics.id", ondelete="CASCADE"), nullable=False, index=True
    )

    value = Column(Float, nullable=False)
    # First day of the week this value belongs to
    week_start = Column(Date, nullable=False, index=True)

    metric = relationship("Metric", back_populates="values")
