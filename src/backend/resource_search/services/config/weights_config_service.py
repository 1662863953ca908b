"""
Weights Configuration Service
Loads search weights from JSON with schema validation and mtime-polled hot reload
"""

import asyncio
import json
import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ...models.weights import DEFAULT_WEIGHTS_CONFIG, WeightConfig, WeightsConfigFile
from ...utils.logging_context import log_performance
from .config_validator import ConfigValidator, ValidationResult, get_validator

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS_PATH = Path(__file__).parent.parent.parent / "config" / "search_weights.json"
DEFAULT_POLL_INTERVAL_SECONDS = 5.0


class WeightsConfigService:
    """
    Process-wide owner of the search weights snapshot.

    Each successful load replaces the snapshot by reference; snapshots are
    frozen models so readers never see a partially applied file. A file that
    fails to parse or validate is logged and ignored: the previous snapshot
    stays active, or the hardcoded defaults when nothing has loaded yet.
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        validator: Optional[ConfigValidator] = None,
    ):
        """
        Initialize the service (does not load; call load())

        Args:
            config_path: Weights JSON file (defaults to the packaged search_weights.json)
            poll_interval_seconds: How often the watcher checks the file mtime
            validator: Schema validator (defaults to the shared ConfigValidator)
        """
        self.config_path = Path(config_path) if config_path else DEFAULT_WEIGHTS_PATH
        self.poll_interval_seconds = poll_interval_seconds
        self._validator = validator or get_validator()

        self._lock = threading.Lock()
        self._snapshot: WeightsConfigFile = DEFAULT_WEIGHTS_CONFIG
        self._using_fallback = True
        self._has_loaded = False
        self._last_mtime: Optional[float] = None
        self._last_loaded_at: Optional[datetime] = None
        self._last_error: Optional[str] = None
        self._last_validation: Optional[ValidationResult] = None
        self._watch_task: Optional[asyncio.Task] = None

        logger.info(f"WeightsConfigService initialized with config_path: {self.config_path}")

    def _get_mtime(self) -> Optional[float]:
        try:
            return self.config_path.stat().st_mtime
        except OSError:
            return None

    def load(self) -> bool:
        """
        Read, validate and activate the weights file.

        Returns:
            True if the file became the active snapshot
        """
        self._last_mtime = self._get_mtime()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            return self._reject(f"Failed to read weights configuration: {e}")

        result = self._validator.validate_weights_config(document)
        self._last_validation = result
        if not result.is_valid:
            return self._reject(f"Weights configuration failed validation: {'; '.join(result.errors)}")

        for warning in result.warnings:
            logger.warning(f"Weights configuration: {warning}")

        try:
            snapshot = WeightsConfigFile.model_validate(document)
        except ValidationError as e:
            return self._reject(f"Weights configuration rejected: {e}")

        with self._lock:
            self._snapshot = snapshot
            self._using_fallback = False
            self._has_loaded = True
            self._last_loaded_at = datetime.utcnow()
            self._last_error = None

        logger.info(f"Loaded weights configuration v{snapshot.version} from {self.config_path}")
        return True

    def _reject(self, message: str) -> bool:
        self._last_error = message
        logger.error(message)

        if self._has_loaded:
            logger.warning(f"Keeping last-known-good weights configuration v{self._snapshot.version}")
        else:
            logger.warning("Using hardcoded default weights configuration")
        return False

    def check_for_changes(self) -> bool:
        """
        Reload when the file mtime differs from the last load attempt.

        Returns:
            True if a reload was attempted
        """
        mtime = self._get_mtime()
        if mtime == self._last_mtime:
            return False

        logger.info("Weights configuration file changed, reloading...")
        with log_performance("weights_reload"):
            self.load()
        return True

    async def _watch(self):
        while True:
            await asyncio.sleep(self.poll_interval_seconds)
            try:
                self.check_for_changes()
            except Exception as e:
                logger.error(f"Weights configuration watcher error: {e}", exc_info=True)

    def start_watching(self) -> None:
        """Start polling the file from the running event loop"""
        if self.is_watching:
            return
        self._watch_task = asyncio.get_running_loop().create_task(self._watch())
        logger.info(f"Watching {self.config_path} every {self.poll_interval_seconds}s")

    async def stop_watching(self) -> None:
        """Cancel the polling task"""
        if self._watch_task is None:
            return
        self._watch_task.cancel()
        try:
            await self._watch_task
        except asyncio.CancelledError:
            pass
        self._watch_task = None
        logger.info("Stopped watching weights configuration")

    @property
    def is_watching(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    def get_config(self) -> WeightsConfigFile:
        """Current snapshot including version and metadata"""
        with self._lock:
            return self._snapshot

    def get_weights(self) -> WeightConfig:
        """Current weights without file bookkeeping"""
        return self.get_config().to_weights()

    def get_version(self) -> str:
        return self.get_config().version

    @property
    def using_fallback(self) -> bool:
        """True when the hardcoded defaults are active"""
        return self._using_fallback

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def last_loaded_at(self) -> Optional[datetime]:
        return self._last_loaded_at

    @property
    def last_validation(self) -> Optional[ValidationResult]:
        return self._last_validation


# Singleton instance
_weights_config_service: Optional[WeightsConfigService] = None


def get_weights_config_service() -> WeightsConfigService:
    """
    Get global WeightsConfigService singleton instance

    Returns:
        WeightsConfigService instance (loaded on first access)
    """
    global _weights_config_service

    if _weights_config_service is None:
        _weights_config_service = init_weights_config_service()

    return _weights_config_service


def init_weights_config_service(
    config_path: Optional[Path] = None,
    poll_interval_seconds: Optional[float] = None,
) -> WeightsConfigService:
    """
    Initialize global WeightsConfigService and load the file

    Args:
        config_path: Weights file (defaults to WEIGHTS_CONFIG_PATH env var, then the packaged file)
        poll_interval_seconds: Watch interval (defaults to WEIGHTS_RELOAD_INTERVAL_SECONDS env var, then 5s)

    Returns:
        Initialized WeightsConfigService
    """
    global _weights_config_service

    if config_path is None and os.getenv("WEIGHTS_CONFIG_PATH"):
        config_path = Path(os.environ["WEIGHTS_CONFIG_PATH"])
    if poll_interval_seconds is None:
        poll_interval_seconds = float(os.getenv("WEIGHTS_RELOAD_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS))

    _weights_config_service = WeightsConfigService(config_path, poll_interval_seconds)
    _weights_config_service.load()
    return _weights_config_service


def clear_weights_config_service():
    """Clear service singleton (useful for testing)"""
    global _weights_config_service
    _weights_config_service = None
    logger.debug("WeightsConfigService singleton cleared")
