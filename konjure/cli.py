# konjure/cli.py
import asyncio
import logging
from typing import List, Tuple

import typer
from dotenv import load_dotenv

from konjure.container import Container
from konjure.core.contracts import COLLECT_CLI_COMMANDS, CliCommand
from konjure.core.hooks import HookManager
from konjure.core.loader import PluginLoader

logger = logging.getLogger(__name__)


def bootstrap() -> Tuple[Container, HookManager]:
    """Builds the platform core services and registers every plugin."""
    container = Container()
    hook_manager = HookManager(container)

    # 1. 注册平台核心服务
    container.register("container", lambda: container)
    container.register("hook_manager", lambda: hook_manager)

    # 2. 加载插件（同步注册）
    loader = PluginLoader(container, hook_manager)
    loader.load_plugins()
    container.register("plugin_loader", lambda: loader)

    return container, hook_manager


def create_app() -> typer.Typer:
    """应用工厂函数：组装根命令以及所有插件贡献的子命令。"""
    load_dotenv()
    container, hook_manager = bootstrap()

    app = typer.Typer(name="konjure", help="Konjure Toolkit Command-Line Interface", no_args_is_help=True)
    plugin_app = typer.Typer(name="plugins", help="Inspect Konjure plugins.")
    app.add_typer(plugin_app)

    @plugin_app.command("list")
    def list_plugins():
        """Lists the installed plugins in load order."""
        loader: PluginLoader = container.resolve("plugin_loader")
        for i, plugin in enumerate(loader.loaded):
            typer.echo(f"  {i + 1}. {plugin['name']} (priority: {plugin['priority']})")

    commands: List[CliCommand] = asyncio.run(hook_manager.filter(COLLECT_CLI_COMMANDS, []))
    if not commands:
        logger.warning("No CLI commands were collected from plugins.")
    for name, command in commands:
        app.command(name)(command)
        logger.debug(f"Added command '{name}'.")

    return app


def main():
    create_app()()


if __name__ == "__main__":
    main()
