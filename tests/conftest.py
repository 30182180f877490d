# tests/conftest.py

import pytest

from konjure.container import Container
from konjure.core.hooks import HookManager


@pytest.fixture
def container() -> Container:
    return Container()


@pytest.fixture
def hook_manager(container: Container) -> HookManager:
    return HookManager(container)
