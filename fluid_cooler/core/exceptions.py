"""Custom exception hierarchy for the fluid cooler simulation."""

from typing import Any, Dict, Optional


class FluidCoolerError(Exception):
    """Base exception for all fluid_cooler errors."""
    pass


class ComponentError(FluidCoolerError):
    """Base exception for component-related errors."""
    pass


class ComponentInitializationError(ComponentError):
    """Raised when component initialization fails."""
    pass


class RegistryError(FluidCoolerError):
    """Base exception for registry errors."""
    pass


class ComponentNotFoundError(RegistryError):
    """Raised for an unknown name, out-of-range handle or name/handle mismatch."""
    pass


class DuplicateComponentError(RegistryError):
    """Raised when a name is registered twice (case-insensitive)."""
    pass


class ConfigurationError(FluidCoolerError):
    """Raised for configuration loading/validation errors."""
    pass


class SizingError(ConfigurationError):
    """Raised when a sizing rule cannot be applied to the design inputs."""
    pass


class SizingInfeasibleError(SizingError):
    """
    Raised when the UA bracket holds no root for the design load.

    Carries both bracket ends and the resulting outlet temperatures so the
    caller can report why the target load is unreachable.
    """

    def __init__(
        self,
        message: str,
        ua_low: float,
        ua_high: float,
        outlet_temp_at_ua_low: float,
        outlet_temp_at_ua_high: float,
        design_inputs: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.ua_low = ua_low
        self.ua_high = ua_high
        self.outlet_temp_at_ua_low = outlet_temp_at_ua_low
        self.outlet_temp_at_ua_high = outlet_temp_at_ua_high
        self.design_inputs = design_inputs or {}


class UnresolvedSizeError(FluidCoolerError):
    """Raised when an autosized field is read before sizing resolved it."""
    pass


class SimulationError(FluidCoolerError):
    """Raised for simulation execution errors."""
    pass


class ThermodynamicDataError(FluidCoolerError):
    """Raised when a property lookup fails or returns a non-physical value."""
    pass
