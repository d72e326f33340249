"""
Rate-limited recurring warnings.

The first occurrence of a (unit, kind) warning is logged with full detail.
Later occurrences are only counted, with the minimum and maximum of the
reported value kept so a single summary line can be written at the end of
the run.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class DiagnosticRecord:
    """Aggregate of every occurrence of one warning key."""
    message: str
    units: str = ""
    count: int = 0
    minimum: float = math.inf
    maximum: float = -math.inf

    def add(self, value: Optional[float]) -> None:
        self.count += 1
        if value is not None:
            self.minimum = min(self.minimum, value)
            self.maximum = max(self.maximum, value)

    @property
    def has_values(self) -> bool:
        return self.maximum >= self.minimum


@dataclass
class DiagnosticThrottle:
    """
    Warning throttle keyed by (unit id, warning kind).

    Example:
        throttle = DiagnosticThrottle()
        throttle.warn("COOLER 1", "mass_flow_high", "Flow exceeds design",
                      value=12.3, details=["Flow=12.3 kg/s"])
        ...
        throttle.log_summary()
    """
    full_detail_limit: int = 1
    _records: Dict[Tuple[str, str], DiagnosticRecord] = field(default_factory=dict)

    def warn(
        self,
        unit: str,
        kind: str,
        message: str,
        value: Optional[float] = None,
        details: Optional[List[str]] = None,
        units: str = "",
    ) -> bool:
        """
        Record one occurrence.

        Returns:
            True when this occurrence was logged in full detail.
        """
        key = (unit, kind)
        record = self._records.get(key)
        if record is None:
            record = DiagnosticRecord(message=message, units=units)
            self._records[key] = record
        record.add(value)

        if record.count <= self.full_detail_limit:
            logger.warning(f"{unit}: {message}")
            for line in details or []:
                logger.warning(f"  ... {line}")
            return True

        logger.debug(f"{unit}: {message} (occurrence {record.count})")
        return False

    def count(self, unit: str, kind: str) -> int:
        record = self._records.get((unit, kind))
        return record.count if record else 0

    def summary(self) -> Dict[Tuple[str, str], DiagnosticRecord]:
        return dict(self._records)

    def log_summary(self) -> None:
        """Emit one line per key that recurred after its detailed report."""
        for (unit, kind), record in self._records.items():
            if record.count <= self.full_detail_limit:
                continue
            line = f"{unit}: {record.message} error continues. Count={record.count}"
            if record.has_values:
                line += (
                    f", Min={record.minimum:.6g} {record.units}, "
                    f"Max={record.maximum:.6g} {record.units}"
                ).rstrip()
            logger.warning(line)

    def reset(self) -> None:
        self._records.clear()
