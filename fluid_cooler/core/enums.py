"""
Integer-based enumerations for the fluid cooler simulation.

All enums use IntEnum so they can be stored in NumPy result arrays and
written straight into telemetry rows (``int(mode)``).
"""

from enum import IntEnum


class FluidCoolerType(IntEnum):
    """
    Fan arrangement of a fluid cooler.

    Examples:
        cooler_type = FluidCoolerType.from_label("FluidCooler:TwoSpeed")
        if cooler_type == FluidCoolerType.TWO_SPEED:
            ...
    """
    SINGLE_SPEED = 0  # One fan speed, cycled to meet setpoint
    TWO_SPEED = 1     # Low/high fan speeds, cycled between stages

    @classmethod
    def from_label(cls, label: str) -> "FluidCoolerType":
        key = label.strip().upper().replace("FLUIDCOOLER:", "").replace("_", "")
        if key in ("SINGLESPEED", "SINGLE"):
            return cls.SINGLE_SPEED
        if key in ("TWOSPEED", "TWO"):
            return cls.TWO_SPEED
        raise ValueError(f"Unknown fluid cooler type '{label}'")

    @property
    def label(self) -> str:
        """Equipment type name used in reports and messages."""
        if self == FluidCoolerType.TWO_SPEED:
            return "FluidCooler:TwoSpeed"
        return "FluidCooler:SingleSpeed"


class PerformanceInputMethod(IntEnum):
    """
    How the user describes thermal performance.

    U_FACTOR_TIMES_AREA: UA (and design water flow) given or autosized.
    NOMINAL_CAPACITY: nominal capacity given, UA back-solved from it.
    """
    U_FACTOR_TIMES_AREA = 0
    NOMINAL_CAPACITY = 1

    @classmethod
    def from_label(cls, label: str) -> "PerformanceInputMethod":
        key = label.strip().upper().replace("_", "")
        if key in ("UFACTORTIMESAREAANDDESIGNWATERFLOWRATE", "UFACTORTIMESAREA"):
            return cls.U_FACTOR_TIMES_AREA
        if key == "NOMINALCAPACITY":
            return cls.NOMINAL_CAPACITY
        raise ValueError(f"Unknown performance input method '{label}'")


class SizingStatus(IntEnum):
    """Resolution state of a sizable design field."""
    UNRESOLVED = 0      # Autosize requested, value not yet known
    AUTOSIZED = 1       # Value computed by sizing
    USER_SPECIFIED = 2  # Value given in the configuration


class LifecyclePhase(IntEnum):
    """
    Lifecycle phase of a registered unit.

    Phases only move forward, except that ENVIRONMENT_INITIALIZED drops back
    to REGISTERED between environments so flow initialisation runs again at
    the next begin-environment step.
    """
    CREATED = 0
    REGISTERED = 1               # Located on its plant loop
    ENVIRONMENT_INITIALIZED = 2  # Design mass flow set for this environment


class SolverStatus(IntEnum):
    """Outcome of a bracketed root solve."""
    CONVERGED = 0
    ITERATION_LIMIT_EXCEEDED = 1
    NO_BRACKET = 2


class LoopDemandScheme(IntEnum):
    """
    Loop demand calculation scheme supplying the leaving water setpoint.

    Examples:
        scheme = LoopDemandScheme.from_label("DualSetPointDeadBand")
    """
    SINGLE_SETPOINT = 0         # Use the loop setpoint
    DUAL_SETPOINT_DEADBAND = 1  # Use the high member of the setpoint pair

    @classmethod
    def from_label(cls, label: str) -> "LoopDemandScheme":
        key = label.strip().upper().replace("_", "")
        if key == "SINGLESETPOINT":
            return cls.SINGLE_SETPOINT
        if key == "DUALSETPOINTDEADBAND":
            return cls.DUAL_SETPOINT_DEADBAND
        raise ValueError(f"Unknown loop demand scheme '{label}'")


class OperatingMode(IntEnum):
    """
    Capacity control state reached during a timestep.

    Examples:
        result = two_speed_control(...)
        if result.mode == OperatingMode.HIGH_FAN:
            logger.debug("Setpoint not reachable")
    """
    IDLE = 0              # No flow, or no cooling needed
    FULL_FAN = 1          # Single speed, setpoint not reachable
    PARTIAL_FAN = 2       # Single speed, cycled to meet setpoint
    LOW_FAN = 3           # Two speed, low fan for the whole timestep
    LOW_FAN_PARTIAL = 4   # Two speed, cycled between off and low
    HIGH_FAN = 5          # Two speed, setpoint not reachable
    HIGH_FAN_PARTIAL = 6  # Two speed, cycled between low and high


class FlowLock(IntEnum):
    """Loop side flow resolution state set by the plant loop solver."""
    UNLOCKED = 0  # Flow still being resolved; equipment requests only
    LOCKED = 1    # Flow fixed for this iteration; equipment may act on it
