"""
Laycan (laydays/cancelling) compliance.

Compares an ETA against the agreed arrival window and reports how many
whole hours early or late the vessel is expected.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional


class LaycanStatus(str, Enum):
    UNSPECIFIED = "UNSPECIFIED"
    COMPLIANT = "COMPLIANT"
    EARLY = "EARLY"
    LATE = "LATE"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class LaycanWindow:
    """Arrival window. Either bound may be open."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, 'start', as_utc(self.start))
        object.__setattr__(self, 'end', as_utc(self.end))
        if self.start and self.end and self.start > self.end:
            raise ValueError(
                f"Laycan start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def to_dict(self) -> Dict:
        return {
            'start': self.start.isoformat() if self.start else None,
            'end': self.end.isoformat() if self.end else None,
        }


@dataclass(frozen=True)
class LaycanCompliance:
    status: LaycanStatus
    risk_hours: int
    eta: datetime
    window: Optional[LaycanWindow] = None


def _whole_hours(seconds: float) -> int:
    """Round a positive duration to whole hours, halves rounding up."""
    return int(math.floor(seconds / 3600.0 + 0.5))


def evaluate_laycan(eta: datetime, window: Optional[LaycanWindow]) -> LaycanCompliance:
    """
    Classify an ETA against a laycan window.

    - no window: UNSPECIFIED, risk 0
    - ETA after end: LATE, risk = hours late
    - ETA before start: EARLY, risk = hours early
    - otherwise COMPLIANT, risk 0 (both bounds inclusive)
    """
    eta = as_utc(eta)
    if window is None or window.is_open:
        return LaycanCompliance(LaycanStatus.UNSPECIFIED, 0, eta, window)

    if window.end is not None and eta > window.end:
        late_s = (eta - window.end).total_seconds()
        return LaycanCompliance(LaycanStatus.LATE, _whole_hours(late_s), eta, window)

    if window.start is not None and eta < window.start:
        early_s = (window.start - eta).total_seconds()
        return LaycanCompliance(LaycanStatus.EARLY, _whole_hours(early_s), eta, window)

    return LaycanCompliance(LaycanStatus.COMPLIANT, 0, eta, window)
