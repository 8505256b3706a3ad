from .loader import CONFIG_ENV_VAR, AppConfig, ConfigError, load_config, save_config

__all__ = ["CONFIG_ENV_VAR", "AppConfig", "ConfigError", "load_config", "save_config"]
