# konjure_plugins/core_compiler/__init__.py
import logging

from konjure.core.contracts import COLLECT_CLI_COMMANDS, Container, HookManager
from .cli import COMMAND_NAME, build_compile_command
from .compiler import AssetCompiler
from .compressors import CssCompressor, JavaScriptCompressor

logger = logging.getLogger(__name__)

# --- 服务工厂 (Service Factories) ---

def _create_asset_compiler(container: Container) -> AssetCompiler:
    return AssetCompiler(
        js_compressor=container.resolve("js_compressor"),
        css_compressor=container.resolve("css_compressor"),
    )

# --- 钩子实现 (Hook Implementations) ---

async def provide_cli_commands(commands: list, container: Container) -> list:
    commands.append((COMMAND_NAME, build_compile_command(container)))
    logger.debug(f"Provided '{COMMAND_NAME}' command to the toolkit.")
    return commands

def register_plugin(container: Container, hook_manager: HookManager):
    logger.debug("--> 正在注册 [core_compiler] 插件...")
    container.register("js_compressor", lambda: JavaScriptCompressor(), singleton=True)
    container.register("css_compressor", lambda: CssCompressor(), singleton=True)
    container.register("asset_compiler", _create_asset_compiler, singleton=True)

    hook_manager.add_implementation(
        COLLECT_CLI_COMMANDS, provide_cli_commands, plugin_name="core_compiler"
    )
    logger.debug("插件 [core_compiler] 注册成功。")
