"""
Configuration Services
Search weights loading, validation, hot reload and health reporting
"""

from .config_validator import ConfigValidator, ValidationResult, get_validator
from .config_monitor import ConfigMonitor, ConfigStatus, get_config_monitor, init_config_monitor
from .weights_config_service import (
    WeightsConfigService,
    get_weights_config_service,
    init_weights_config_service,
)

__all__ = [
    "ConfigValidator",
    "ValidationResult",
    "get_validator",
    "ConfigMonitor",
    "ConfigStatus",
    "get_config_monitor",
    "init_config_monitor",
    "WeightsConfigService",
    "get_weights_config_service",
    "init_weights_config_service",
]
