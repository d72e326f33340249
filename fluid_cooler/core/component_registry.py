"""
Instance registry for plant equipment.

The ComponentRegistry is owned by the simulation context and provides:
- Registration with stable integer handles and case-insensitive unique names
- Lookup by name or handle, with the handle/name cross-check the loop
  manager relies on
- The simulate() dispatch used for sizing and timestep calls
- Lifecycle coordination (initialize all)
"""

from typing import Dict, Iterator, List, Optional, Set, Tuple
import logging

from fluid_cooler.core.component import Component, LoadCapacities
from fluid_cooler.core.exceptions import (
    ComponentInitializationError,
    ComponentNotFoundError,
    DuplicateComponentError,
)

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """
    Registry of fluid coolers (and any other Component) in one simulation.

    Example:
        registry = ComponentRegistry()
        handle = registry.register("Cooler 1", cooler)

        registry.initialize_all(dt=0.25)

        # Sizing pass, then every timestep
        handle, caps = registry.simulate("Cooler 1", None, True, init_loop_equip=True)
        registry.simulate("COOLER 1", handle, run_flag=True)
    """

    def __init__(self) -> None:
        self._components: List[Component] = []
        self._handles: Dict[str, int] = {}
        self._unchecked: Set[int] = set()

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().upper()

    def register(self, name: str, component: Component) -> int:
        """
        Register a component under a unique name.

        Returns:
            Stable 0-based handle

        Raises:
            DuplicateComponentError: If the name exists (case-insensitive)
            TypeError: If component doesn't inherit from Component
        """
        key = self._key(name)
        if key in self._handles:
            raise DuplicateComponentError(f"Component name '{name}' already registered")

        if not isinstance(component, Component):
            raise TypeError(
                f"Component must inherit from Component ABC, got {type(component)}"
            )

        handle = len(self._components)
        component.set_component_id(name)
        component.handle = handle
        self._components.append(component)
        self._handles[key] = handle
        self._unchecked.add(handle)

        logger.debug(f"Registered component '{name}' (handle {handle})")
        return handle

    def get(self, handle: int) -> Component:
        """
        Raises:
            ComponentNotFoundError: If handle is out of range
        """
        if not 0 <= handle < len(self._components):
            raise ComponentNotFoundError(
                f"Invalid component handle passed={handle}, "
                f"Number of units={len(self._components)}"
            )
        return self._components[handle]

    def find_handle(self, name: str) -> Optional[int]:
        return self._handles.get(self._key(name))

    def has(self, name: str) -> bool:
        return self._key(name) in self._handles

    def get_by_name(self, name: str) -> Component:
        """
        Raises:
            ComponentNotFoundError: If name not registered
        """
        handle = self.find_handle(name)
        if handle is None:
            raise ComponentNotFoundError(
                f"Component '{name}' not found in registry. "
                f"Available: {self.get_all_ids()}"
            )
        return self._components[handle]

    def resolve(self, name: str, handle: Optional[int] = None) -> int:
        """
        Turn a (name, cached handle) pair from the loop manager into a handle.

        Without a handle the name is looked up. With a handle, the handle is
        range checked and, the first time it is used, checked to refer to
        the same unit as ``name``.

        Raises:
            ComponentNotFoundError: Unknown name, handle out of range, or
                handle naming a different unit
        """
        if handle is None:
            found = self.find_handle(name)
            if found is None:
                raise ComponentNotFoundError(f"Unit not found={name}")
            return found

        if not 0 <= handle < len(self._components):
            raise ComponentNotFoundError(
                f"Invalid component handle passed={handle}, "
                f"Number of units={len(self._components)}, Entered unit name={name}"
            )
        if handle in self._unchecked:
            stored = self._components[handle].component_id
            if self._key(name) != self._key(stored):
                raise ComponentNotFoundError(
                    f"Invalid component handle passed={handle}, Unit name={name}, "
                    f"stored unit name for that handle={stored}"
                )
            self._unchecked.discard(handle)
        return handle

    def simulate(
        self,
        name: str,
        handle: Optional[int] = None,
        run_flag: bool = True,
        init_loop_equip: bool = False,
    ) -> Tuple[int, Optional[LoadCapacities]]:
        """
        Dispatch one loop manager call to the named unit.

        Returns:
            (handle, capacities); capacities is only set for init_loop_equip
        """
        handle = self.resolve(name, handle)
        capacities = self._components[handle].simulate(run_flag, init_loop_equip)
        return handle, capacities

    def initialize_all(self, dt: float) -> None:
        """
        Initialize all registered components in registration order.

        Raises:
            ComponentInitializationError: If any component initialization fails
        """
        logger.info(f"Initializing {len(self._components)} components with dt={dt}h")

        failed_components = []
        for component in self._components:
            try:
                component.initialize(dt, self)
                logger.debug(f"Initialized '{component.component_id}'")
            except Exception as e:
                logger.error(f"Failed to initialize '{component.component_id}': {e}")
                failed_components.append((component.component_id, e))

        if failed_components:
            error_msg = "\n".join(
                f"  - {comp_id}: {error}"
                for comp_id, error in failed_components
            )
            raise ComponentInitializationError(
                f"Failed to initialize components:\n{error_msg}"
            )

        logger.info("All components initialized successfully")

    def get_all_ids(self) -> List[str]:
        return [component.component_id for component in self._components]

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[Component]:
        return iter(self._components)
