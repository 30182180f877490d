# konjure/container.py

import inspect
import logging
from typing import Dict, Any, Callable, List

from konjure.core.contracts import Container as ContainerInterface

logger = logging.getLogger(__name__)


class Container(ContainerInterface):
    """A small service container with lazy factories and circular dependency detection."""
    def __init__(self):
        self._factories: Dict[str, Callable] = {}
        self._singletons: Dict[str, bool] = {}
        self._instances: Dict[str, Any] = {}
        # 当前正在解析的服务名（按顺序），用于检测循环依赖
        self._resolution_stack: List[str] = []

    def register(self, name: str, factory: Callable, singleton: bool = True) -> None:
        """注册一个服务工厂。工厂可以不接收参数，或者接收容器本身。"""
        if name in self._factories:
            logger.warning(f"Overwriting service registration for '{name}'")
            self._instances.pop(name, None)
        self._factories[name] = factory
        self._singletons[name] = singleton

    def resolve(self, name: str) -> Any:
        """
        解析（获取）一个服务实例。
        Singletons are built on first use and cached; transient services are built on every call.
        """
        if name in self._resolution_stack:
            path = " -> ".join(self._resolution_stack + [name])
            raise RuntimeError(f"Circular dependency detected: {path}")

        is_singleton = self._singletons.get(name, True)
        if is_singleton and name in self._instances:
            return self._instances[name]

        if name not in self._factories:
            raise ValueError(f"Service '{name}' not found in container.")

        self._resolution_stack.append(name)
        try:
            instance = self._call_factory(self._factories[name])
        finally:
            self._resolution_stack.pop()

        if is_singleton:
            logger.debug(f"Resolved service '{name}'. Singleton: True")
            self._instances[name] = instance
        return instance

    def _call_factory(self, factory: Callable) -> Any:
        try:
            params = inspect.signature(factory).parameters
        except (TypeError, ValueError):
            return factory()
        # 只有存在必填的位置参数时才注入容器
        if any(p.default is p.empty and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
               for p in params.values()):
            return factory(self)
        return factory()
