# konjure/core/loader.py

import json
import logging
import importlib
import importlib.resources
from typing import List, Dict

from konjure.core.contracts import Container, HookManager, PluginRegisterFunc

logger = logging.getLogger(__name__)

PLUGINS_PACKAGE = "konjure_plugins"
DEFAULT_PRIORITY = 100


class PluginLoader:
    def __init__(self, container: Container, hook_manager: HookManager, package: str = PLUGINS_PACKAGE):
        self._container = container
        self._hook_manager = hook_manager
        self._package = package
        self.loaded: List[Dict] = []

    def load_plugins(self) -> List[Dict]:
        """执行插件加载的全过程：发现、排序、注册。"""
        sorted_plugins = self.discover_plugins()
        if not sorted_plugins:
            logger.warning("No plugins discovered in package '%s'.", self._package)
            return []

        self._register_plugins(sorted_plugins)
        self.loaded = sorted_plugins

        logger.debug(
            "Plugin load order: %s",
            ", ".join(f"{p['name']} ({p['priority']})" for p in sorted_plugins)
        )
        return sorted_plugins

    def discover_plugins(self) -> List[Dict]:
        """Scans the plugins package for sub-packages carrying a manifest.json, sorted by (priority, name)."""
        discovered = []
        try:
            plugins_package_path = importlib.resources.files(self._package)
        except ModuleNotFoundError:
            return discovered

        for plugin_path in plugins_package_path.iterdir():
            if not plugin_path.is_dir() or plugin_path.name.startswith(('__', '.')):
                continue

            manifest_path = plugin_path / "manifest.json"
            if not manifest_path.is_file():
                continue

            try:
                manifest = json.loads(manifest_path.read_text(encoding='utf-8'))
            except (OSError, ValueError) as e:
                # 在发现阶段保持宽容，只处理能成功解析的
                logger.warning(f"Skipping plugin '{plugin_path.name}': unreadable manifest ({e}).")
                continue

            discovered.append({
                "name": manifest.get('name', plugin_path.name),
                "priority": manifest.get('priority', DEFAULT_PRIORITY),
                "manifest": manifest,
                "import_path": f"{self._package}.{plugin_path.name}",
            })

        return sorted(discovered, key=lambda p: (p['priority'], p['name']))

    def _register_plugins(self, plugins: List[Dict]):
        """按顺序导入并调用每个插件的注册函数。"""
        for plugin_info in plugins:
            plugin_name = plugin_info['name']
            import_path = plugin_info['import_path']

            try:
                plugin_module = importlib.import_module(import_path)
                register_func: PluginRegisterFunc = getattr(plugin_module, "register_plugin")
                register_func(self._container, self._hook_manager)
            except Exception as e:
                # 插件依赖可能被破坏，这里选择停止加载
                logger.critical(f"Failed to load plugin '{plugin_name}' ({import_path}).", exc_info=e)
                raise RuntimeError(f"无法加载插件 {plugin_name}") from e
