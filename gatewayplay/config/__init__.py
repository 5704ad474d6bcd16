"""Configuration module for gatewayplay."""

from gatewayplay.config.loader import load_config, save_config, get_config_path
from gatewayplay.config.schema import Config, GatewayConfig, InvokerConfig
from gatewayplay.config.access import get_config, clear_config_cache

__all__ = [
    "Config",
    "GatewayConfig",
    "InvokerConfig",
    "load_config",
    "save_config",
    "get_config_path",
    "get_config",
    "clear_config_cache",
]
