"""
Core component abstractions for the fluid cooler simulation.

This module defines the Component abstract base class that plant equipment
inherits from, giving every unit the same lifecycle:

1. initialize(): bind timestep and registry
2. simulate(): called by the plant loop manager, once for sizing and then
   once per timestep
3. get_state(): telemetry row for monitoring and results export
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, TYPE_CHECKING

from fluid_cooler.core.enums import LifecyclePhase

if TYPE_CHECKING:
    from fluid_cooler.core.component_registry import ComponentRegistry


@dataclass(frozen=True)
class LoadCapacities:
    """Load range reported to the loop manager after init_loop_equip (W)."""
    min_load: float = 0.0
    max_load: float = 0.0
    opt_load: float = 0.0


class Component(ABC):
    """
    Abstract base class for plant equipment.

    Lifecycle progress is held in ``phase`` rather than in separate one-time
    flags. Subclasses advance it through idempotent ``ensure_*`` methods.

    Attributes:
        component_id: Unit name, set at registration
        handle: Stable integer handle assigned by the registry
        dt: Simulation timestep in hours
        phase: Current LifecyclePhase
    """

    def __init__(self, config: Any = None, **kwargs) -> None:
        """
        Args:
            config: Optional component configuration object (Pydantic model)
            **kwargs:
                - component_id: Optional explicit name (for tests/manual wiring)
        """
        component_id = kwargs.pop("component_id", None)

        self.component_id: Optional[str] = None
        self.handle: Optional[int] = None
        self.dt: float = 0.0
        self._registry: Optional['ComponentRegistry'] = None
        self._initialized: bool = False
        self.phase: LifecyclePhase = LifecyclePhase.CREATED
        self.config = config

        if component_id is not None:
            self.set_component_id(component_id)

    @abstractmethod
    def initialize(self, dt: float, registry: 'ComponentRegistry') -> None:
        """
        Bind the component to its simulation context.

        Args:
            dt: Simulation timestep in hours
            registry: Owning ComponentRegistry

        Example:
            def initialize(self, dt: float, registry: ComponentRegistry) -> None:
                super().initialize(dt, registry)
                self.fan_energy_j = 0.0
        """
        self.dt = dt
        self._registry = registry
        self._initialized = True

    @abstractmethod
    def simulate(self, run_flag: bool, init_loop_equip: bool) -> Optional[LoadCapacities]:
        """
        Entry point used by the plant loop manager.

        Args:
            run_flag: Loop manager requests operation this timestep
            init_loop_equip: Sizing/initialisation call instead of a timestep

        Returns:
            LoadCapacities when init_loop_equip is set, else None
        """

    @abstractmethod
    def get_state(self) -> Dict[str, Any]:
        """
        Return current component state for monitoring/results export.

        All values must be JSON-serializable (primitives, lists, dicts).
        """
        return {
            "component_id": self.component_id,
            "initialized": self._initialized,
            "phase": int(self.phase),
        }

    def set_component_id(self, component_id: str) -> None:
        self.component_id = component_id

