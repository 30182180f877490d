# konjure/core/contracts.py

from __future__ import annotations
from typing import Any, Callable, Tuple, TypeVar
from abc import ABC, abstractmethod

# --- 1. 核心服务接口与类型别名 (用于类型提示) ---

# 定义一个泛型，常用于 filter 钩子
T = TypeVar('T')

# 插件注册函数的标准签名
PluginRegisterFunc = Callable[['Container', 'HookManager'], None]

# 插件通过 `collect_cli_commands` 钩子贡献的子命令: (命令名, 命令函数)
CliCommand = Tuple[str, Callable[..., Any]]

# 为核心服务定义接口，插件不应直接导入实现，而应依赖这些接口
class Container(ABC):
    @abstractmethod
    def register(self, name: str, factory: Callable, singleton: bool = True) -> None: raise NotImplementedError
    @abstractmethod
    def resolve(self, name: str) -> Any: raise NotImplementedError

class HookManager(ABC):
    @abstractmethod
    def add_implementation(self, hook_name: str, implementation: Callable, priority: int = 10, plugin_name: str = "<unknown>"): raise NotImplementedError
    @abstractmethod
    async def filter(self, hook_name: str, data: T, **kwargs: Any) -> T: raise NotImplementedError


# --- 2. 平台钩子名称 ---

# filter 钩子，数据为 List[CliCommand]。每个插件向列表追加自己的子命令。
COLLECT_CLI_COMMANDS = "collect_cli_commands"

