import pytest
from gallery_bridge.core import handlers
from gallery_bridge.core.state import state


@pytest.fixture(autouse=True)
def reset_state():
    """Reset shared session state and the orchestrator singleton before each test."""
    state.reset()
    handlers.set_orchestrator(None)
    yield
    handlers.set_orchestrator(None)
