# konjure_plugins/core_logging/__init__.py
import os
import yaml
import logging
import logging.config
from pathlib import Path

from konjure.core.contracts import Container, HookManager

PLUGIN_DIR = Path(__file__).parent
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def load_logging_config(config_path: Path = PLUGIN_DIR / "logging_config.yaml") -> dict:
    """Reads the YAML logging config, applying the LOG_LEVEL environment override."""
    with open(config_path, 'r', encoding='utf-8') as f:
        logging_config = yaml.safe_load(f)

    env_log_level = os.getenv("LOG_LEVEL")
    if env_log_level and env_log_level.upper() in LOG_LEVELS:
        log_level_override = env_log_level.upper()
        logging_config['root']['level'] = log_level_override
        for logger_config in logging_config.get('loggers', {}).values():
            logger_config['level'] = log_level_override

    return logging_config


def register_plugin(container: Container, hook_manager: HookManager):
    """这是 core_logging 插件的注册入口。"""
    logging_config = load_logging_config()
    logging.config.dictConfig(logging_config)

    logger = logging.getLogger(__name__)
    logger.debug("插件 [core_logging] 注册成功。")
