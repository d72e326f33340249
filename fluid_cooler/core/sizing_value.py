"""
Tagged design values that may be deferred to autosizing.

A sizable field is in exactly one of three states:

    Unresolved       autosize requested, sizing has not run yet
    Autosized(v)     sizing resolved the field to v
    UserSpecified(v) the configuration supplied v

Reading ``.value`` while unresolved raises UnresolvedSizeError, so capacity
control can never run on a placeholder.
"""

from dataclasses import dataclass
from typing import Any, Optional

from fluid_cooler.core.enums import SizingStatus
from fluid_cooler.core.exceptions import ConfigurationError, UnresolvedSizeError

AUTOSIZE_KEYWORD = "autosize"


@dataclass(frozen=True)
class SizableValue:
    """
    Immutable sizable design field.

    Example:
        ua = SizableValue.autosize()
        ua.is_resolved          # False
        ua = ua.resolve(2350.0)
        ua.value                # 2350.0
        ua.was_autosized        # True
    """
    status: SizingStatus
    raw: Optional[float] = None

    @classmethod
    def autosize(cls) -> "SizableValue":
        return cls(SizingStatus.UNRESOLVED, None)

    @classmethod
    def user(cls, value: float) -> "SizableValue":
        return cls(SizingStatus.USER_SPECIFIED, float(value))

    @classmethod
    def parse(cls, value: Any) -> "SizableValue":
        """
        Build from a configuration entry.

        Args:
            value: Number, None (blank field, read as 0.0) or "autosize"

        Raises:
            ConfigurationError: For any other string
        """
        if isinstance(value, SizableValue):
            return value
        if value is None:
            return cls.user(0.0)
        if isinstance(value, str):
            if value.strip().lower() == AUTOSIZE_KEYWORD:
                return cls.autosize()
            try:
                return cls.user(float(value))
            except ValueError as e:
                raise ConfigurationError(
                    f"Expected a number or '{AUTOSIZE_KEYWORD}', got '{value}'"
                ) from e
        return cls.user(float(value))

    def resolve(self, value: float) -> "SizableValue":
        """Return the autosized counterpart holding ``value``."""
        if self.status == SizingStatus.USER_SPECIFIED:
            raise ConfigurationError(
                f"Cannot autosize a user specified value ({self.raw})"
            )
        return SizableValue(SizingStatus.AUTOSIZED, float(value))

    @property
    def value(self) -> float:
        if self.status == SizingStatus.UNRESOLVED:
            raise UnresolvedSizeError("Autosized value read before sizing resolved it")
        return self.raw

    @property
    def is_resolved(self) -> bool:
        return self.status != SizingStatus.UNRESOLVED

    @property
    def was_autosized(self) -> bool:
        return self.status != SizingStatus.USER_SPECIFIED

    def value_or(self, default: float) -> float:
        return self.raw if self.is_resolved else default

    def __repr__(self) -> str:
        if self.status == SizingStatus.UNRESOLVED:
            return "SizableValue(Unresolved)"
        if self.status == SizingStatus.AUTOSIZED:
            return f"SizableValue(Autosized({self.raw}))"
        return f"SizableValue(UserSpecified({self.raw}))"
