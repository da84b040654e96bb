from .config import ConfigError, StatsConfig, DrillConfig, load_config, validate_config

__all__ = ["ConfigError", "StatsConfig", "DrillConfig", "load_config", "validate_config"]
