from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


def normalize_label(raw: Optional[str]) -> Optional[str]:
    """Canonical form for team/country labels.

    Collapses whitespace and capitalizes every space- or hyphen-separated word,
    e.g. '  north-east   sales ' -> 'North-East Sales'. Blank -> None.
    """
    if raw is None:
        return None
    words = raw.split()
    if not words:
        return None
    return " ".join(
        "-".join(part[:1].upper() + part[1:].lower() for part in word.split("-"))
        for word in words
    )


class MetricBase(BaseModel):
    name: str
    description: Optional[str] = None
    team: Optional[str] = None
    country: Optional[str] = None
    # Higher is better unless told otherwise
    is_above_good: bool = True


class MetricWrite(MetricBase):
    """Payload for create and update (full replace of mutable fields)."""

    model_config = ConfigDict(extra="ignore")

    @field_validator("name", mode="before")
    @classmethod
    def _name_required(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Metric name is required.")
        return v.strip() if isinstance(v, str) else v

    @field_validator("team", "country", mode="before")
    @classmethod
    def _normalize(cls, v):
        return normalize_label(v) if isinstance(v, str) else v

    @field_validator("is_above_good", mode="before")
    @classmethod
    def _default_polarity(cls, v):
        return True if v is None else v


class MetricCreate(MetricWrite):
    pass


class MetricUpdate(MetricWrite):
    pass


class MetricRead(MetricBase):
    id: int

    model_config = ConfigDict(from_attributes=True)
