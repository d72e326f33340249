import pytest
from fluid_cooler.core.component import Component, LoadCapacities
from fluid_cooler.core.component_registry import ComponentRegistry
from fluid_cooler.core.exceptions import (
    ComponentInitializationError,
    ComponentNotFoundError,
    DuplicateComponentError,
)

class MockComponent(Component):
    """Mock component for testing."""

    def __init__(self, fail_init: bool = False):
        super().__init__()
        self.simulate_calls = []
        self.fail_init = fail_init

    def initialize(self, dt: float, registry: ComponentRegistry) -> None:
        if self.fail_init:
            raise RuntimeError("bad init")
        super().initialize(dt, registry)

    def simulate(self, run_flag: bool, init_loop_equip: bool):
        self.simulate_calls.append((run_flag, init_loop_equip))
        if init_loop_equip:
            return LoadCapacities(0.0, 100.0, 100.0)
        return None

    def get_state(self) -> dict:
        return {**super().get_state(), "calls": len(self.simulate_calls)}


def test_component_registration():
    """Registration hands out sequential handles and names the component."""
    registry = ComponentRegistry()
    comp1 = MockComponent()
    comp2 = MockComponent()

    assert registry.register("Cooler A", comp1) == 0
    assert registry.register("Cooler B", comp2) == 1

    assert registry.get(1) is comp2
    assert comp1.component_id == "Cooler A"
    assert comp1.handle == 0
    assert len(registry) == 2

def test_lookup_is_case_insensitive():
    registry = ComponentRegistry()
    component = MockComponent()
    registry.register("Cooler A", component)

    assert registry.has("cooler a")
    assert registry.get_by_name("  COOLER A ") is component

def test_duplicate_registration_raises_error():
    """Duplicate names (case-insensitive) raise DuplicateComponentError."""
    registry = ComponentRegistry()
    registry.register("comp1", MockComponent())

    with pytest.raises(DuplicateComponentError, match="already registered"):
        registry.register("COMP1", MockComponent())

def test_register_rejects_non_components():
    registry = ComponentRegistry()
    with pytest.raises(TypeError):
        registry.register("thing", object())

def test_resolve_unknown_name():
    registry = ComponentRegistry()
    registry.register("Cooler A", MockComponent())

    with pytest.raises(ComponentNotFoundError, match="Unit not found=Missing"):
        registry.resolve("Missing")

def test_resolve_handle_out_of_range():
    registry = ComponentRegistry()
    registry.register("Cooler A", MockComponent())

    with pytest.raises(ComponentNotFoundError, match="Number of units=1"):
        registry.resolve("Cooler A", handle=5)

def test_resolve_handle_name_mismatch_checked_on_first_use():
    registry = ComponentRegistry()
    registry.register("Cooler A", MockComponent())
    registry.register("Cooler B", MockComponent())

    with pytest.raises(ComponentNotFoundError, match="stored unit name for that handle=Cooler A"):
        registry.resolve("Cooler B", handle=0)

    assert registry.resolve("cooler a", handle=0) == 0
    # Checked handles are not re-validated against the name
    assert registry.resolve("anything", handle=0) == 0

def test_simulate_dispatches_and_returns_handle():
    registry = ComponentRegistry()
    component = MockComponent()
    registry.register("Cooler A", component)

    handle, capacities = registry.simulate("Cooler A", init_loop_equip=True)
    assert handle == 0
    assert capacities == LoadCapacities(0.0, 100.0, 100.0)

    handle, capacities = registry.simulate("Cooler A", handle=handle, run_flag=False)
    assert capacities is None
    assert component.simulate_calls == [(True, True), (False, False)]

def test_initialize_all():
    """initialize_all() calls initialize on all components."""
    registry = ComponentRegistry()
    comp1 = MockComponent()
    comp2 = MockComponent()
    registry.register("comp1", comp1)
    registry.register("comp2", comp2)

    registry.initialize_all(dt=0.25)

    assert comp1._initialized and comp2._initialized
    assert comp1.dt == 0.25

def test_initialize_all_collects_failures():
    registry = ComponentRegistry()
    registry.register("good", MockComponent())
    registry.register("bad", MockComponent(fail_init=True))

    with pytest.raises(ComponentInitializationError, match="bad: bad init"):
        registry.initialize_all(dt=1.0)

def test_iteration_and_ids():
    registry = ComponentRegistry()
    first = MockComponent()
    second = MockComponent()
    registry.register("comp1", first)
    registry.register("comp2", second)

    assert list(registry) == [first, second]
    assert registry.get_all_ids() == ["comp1", "comp2"]
