# konjure/core/hooks.py
import asyncio
import logging
import inspect
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Awaitable, TypeVar, Optional

# 从平台核心导入最基础的接口
from konjure.core.contracts import HookManager as HookManagerInterface, Container

logger = logging.getLogger(__name__)

T = TypeVar('T')

# 定义钩子函数的通用签名
HookCallable = Callable[..., Awaitable[Any]]

@dataclass(order=True)
class HookImplementation:
    """封装一个钩子实现及其元数据。"""
    priority: int
    func: HookCallable = field(compare=False)
    plugin_name: str = field(compare=False, default="<unknown>")

class HookManager(HookManagerInterface):
    """
    Dispatches filter hooks contributed by plugins.

    Implementations run in ascending priority order. Any parameter of an
    implementation whose name matches a shared context entry (``container``,
    ``hook_manager`` or anything added with ``add_shared_context``) is
    injected automatically.
    """
    def __init__(self, container: Optional[Container] = None):
        self._hooks: Dict[str, List[HookImplementation]] = defaultdict(list)
        self._shared_context: Dict[str, Any] = {"hook_manager": self}
        if container is not None:
            self._shared_context["container"] = container
        logger.debug("HookManager initialized.")

    @property
    def hook_names(self) -> List[str]:
        return list(self._hooks.keys())

    def add_shared_context(self, name: str, service: Any) -> None:
        """允许在启动过程中向钩子系统添加更多的共享服务。"""
        if name in self._shared_context:
            logger.warning(f"Overwriting shared context for hooks: '{name}'")
        self._shared_context[name] = service

    def _prepare_hook_kwargs(self, func: HookCallable, call_context: Dict[str, Any]) -> Dict[str, Any]:
        # 第一个位置参数留给被过滤的数据
        params = list(inspect.signature(func).parameters.values())[1:]
        return {p.name: call_context[p.name] for p in params if p.name in call_context}

    def add_implementation(
        self,
        hook_name: str,
        implementation: HookCallable,
        priority: int = 10,
        plugin_name: str = "<core>"
    ):
        """向管理器注册一个钩子实现。"""
        if not asyncio.iscoroutinefunction(implementation):
            raise TypeError(f"Hook implementation for '{hook_name}' must be an async function.")

        hook_impl = HookImplementation(priority=priority, func=implementation, plugin_name=plugin_name)
        self._hooks[hook_name].append(hook_impl)
        self._hooks[hook_name].sort()
        logger.debug(f"Registered hook '{hook_name}' from plugin '{plugin_name}' with priority {priority}.")

    async def filter(self, hook_name: str, data: T, **kwargs: Any) -> T:
        """
        触发一个“过滤型”钩子，形成处理链。
        A failing implementation is logged and skipped; the chain continues with the last good data.
        """
        if hook_name not in self._hooks:
            return data

        call_context = {**self._shared_context, **kwargs}
        current_data = data

        for impl in self._hooks[hook_name]:
            try:
                prepared_kwargs = self._prepare_hook_kwargs(impl.func, call_context)
                current_data = await impl.func(current_data, **prepared_kwargs)
            except Exception as e:
                logger.error(
                    f"Error in FILTER hook '{hook_name}' from plugin '{impl.plugin_name}'. Skipping. Error: {e}",
                    exc_info=e
                )

        return current_data
