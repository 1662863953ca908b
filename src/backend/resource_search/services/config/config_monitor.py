"""
Configuration Monitor Service
Reports health of the hot-reloaded search weights configuration
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .weights_config_service import WeightsConfigService, get_weights_config_service

logger = logging.getLogger(__name__)


class ConfigStatus(str, Enum):
    """Configuration health status"""
    HEALTHY = "healthy"
    WARNING = "warning"
    ERROR = "error"
    UNKNOWN = "unknown"


@dataclass
class ConfigHealth:
    """Health status for a configuration file"""
    config_name: str
    status: ConfigStatus
    last_validated: datetime
    active_version: Optional[str] = None
    using_fallback: bool = False
    watching: bool = False
    last_loaded_at: Optional[datetime] = None
    last_error: Optional[str] = None
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    file_path: Optional[str] = None
    file_size_bytes: Optional[int] = None
    last_modified: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses"""
        return {
            "config_name": self.config_name,
            "status": self.status.value,
            "last_validated": self.last_validated.isoformat(),
            "active_version": self.active_version,
            "using_fallback": self.using_fallback,
            "watching": self.watching,
            "last_loaded_at": self.last_loaded_at.isoformat() if self.last_loaded_at else None,
            "last_error": self.last_error,
            "validation_errors": self.validation_errors,
            "validation_warnings": self.validation_warnings,
            "file_path": self.file_path,
            "file_size_bytes": self.file_size_bytes,
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
        }


class ConfigMonitor:
    """
    Health reporting for the weights configuration.

    Status rules:
    - healthy: the file is the active snapshot and the last load succeeded
    - warning: a reload failed and the last-known-good snapshot is still active
    - error: hardcoded defaults are active
    """

    def __init__(self, weights_service: Optional[WeightsConfigService] = None):
        self._weights_service = weights_service
        logger.info("ConfigMonitor initialized")

    @property
    def weights_service(self) -> WeightsConfigService:
        if self._weights_service is None:
            self._weights_service = get_weights_config_service()
        return self._weights_service

    def _get_config_file_info(self) -> Dict[str, Any]:
        """Get file information for the weights config"""
        config_path = self.weights_service.config_path
        try:
            stat = config_path.stat()
        except OSError:
            return {"file_size_bytes": None, "last_modified": None}

        return {
            "file_size_bytes": stat.st_size,
            "last_modified": datetime.fromtimestamp(stat.st_mtime),
        }

    def check_weights_config(self) -> ConfigHealth:
        """
        Build the current health report without reloading

        Returns:
            ConfigHealth for search_weights
        """
        service = self.weights_service
        file_info = self._get_config_file_info()
        validation = service.last_validation

        if service.using_fallback:
            status = ConfigStatus.ERROR
        elif service.last_error:
            status = ConfigStatus.WARNING
        else:
            status = ConfigStatus.HEALTHY

        health = ConfigHealth(
            config_name="search_weights",
            status=status,
            last_validated=datetime.utcnow(),
            active_version=service.get_version(),
            using_fallback=service.using_fallback,
            watching=service.is_watching,
            last_loaded_at=service.last_loaded_at,
            last_error=service.last_error,
            validation_errors=list(validation.errors) if validation else [],
            validation_warnings=list(validation.warnings) if validation else [],
            file_path=str(service.config_path),
            file_size_bytes=file_info["file_size_bytes"],
            last_modified=file_info["last_modified"],
        )

        return health

    def reload_weights_config(self) -> ConfigHealth:
        """Force a reload, then report health"""
        logger.info("Forced reload of weights configuration requested")
        self.weights_service.load()
        return self.check_weights_config()


# Singleton instance
_monitor: Optional[ConfigMonitor] = None


def get_config_monitor() -> ConfigMonitor:
    """
    Get singleton config monitor instance

    Returns:
        ConfigMonitor instance
    """
    global _monitor

    if _monitor is None:
        _monitor = ConfigMonitor()

    return _monitor


def init_config_monitor(weights_service: Optional[WeightsConfigService] = None) -> ConfigMonitor:
    """
    Initialize config monitor

    Args:
        weights_service: Service to report on (defaults to the global singleton)

    Returns:
        Initialized ConfigMonitor
    """
    global _monitor

    _monitor = ConfigMonitor(weights_service)
    logger.info("[OK] ConfigMonitor initialized")

    return _monitor


def clear_config_monitor():
    """Clear monitor singleton (useful for testing)"""
    global _monitor
    _monitor = None
    logger.debug("ConfigMonitor singleton cleared")
