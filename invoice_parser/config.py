"""
配置加载模块

配置文件为 JSON，按配置键名分组，例如：
{
  "default": {"x_tolerance": 10, "y_tolerance": 10},
  "scanned": {"x_tolerance": 15, "y_tolerance": 12, "ocr_lang": "chi_sim+eng"}
}
"""

import json
import logging
import os
from typing import Any, Dict

logger = logging.getLogger("invoice_parser")

DEFAULT_CONFIG: Dict[str, Any] = {
    "x_tolerance": 10,
    "y_tolerance": 10,
    "ocr_lang": "",
    "year": None,
}


def default_config_path() -> str:
    # 与 config.py 同目录下的 invoice_config.json
    current_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(current_dir, "invoice_config.json")


def load_config(config_path: str = None, config_key: str = "default") -> Dict[str, Any]:
    """
    加载解析配置，未配置的项取默认值。

    Args:
        config_path: 配置文件路径，默认为 invoice_config.json
        config_key: 配置键名，默认为 "default"

    Returns:
        配置字典；文件或键不存在时返回默认配置
    """
    config = dict(DEFAULT_CONFIG)

    if config_path is None:
        config_path = default_config_path()

    if not os.path.exists(config_path):
        logger.error(f"Config file not found: {config_path}, using defaults")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            profiles = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}")
        return config

    if config_key not in profiles:
        logger.error(f"Config key '{config_key}' not found in {config_path}, using defaults")
        return config

    unknown = set(profiles[config_key]) - set(DEFAULT_CONFIG)
    if unknown:
        logger.warning(f"Ignoring unknown config option(s): {sorted(unknown)}")

    config.update({k: v for k, v in profiles[config_key].items() if k in DEFAULT_CONFIG})
    logger.info(f"Loaded config '{config_key}' from {config_path}: {config}")
    return config
