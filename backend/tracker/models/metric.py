from sqlalchemy import Boolean, Column, Integer, String, Text, true
from sqlalchemy.orm import relationship
from tracker.db import Base


class Metric(Base):
    __tablename__ = "metrics"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    # Free-form labels used for filtering (normalized on write)
    team = Column(String, nullable=True, index=True)
    country = Column(String, nullable=True, index=True)

    # True: value >= goal is good. False: value <= goal is good.
    is_above_good = Column(Boolean, nullable=False, default=True, server_default=true())

    # Values and goals have no existence without their metric
    values = relationship(
        "MetricValue",
        back_populates="metric",
        cascade="all, delete-orphan",
        order_by="MetricValue.week_start",
    )
    goals = relationship(
        "Goal",
        back_populates="metric",
        cascade="all, delete-orphan",
        order_by="Goal.week_start",
    )
