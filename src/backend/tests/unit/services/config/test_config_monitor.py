"""
Unit tests for ConfigMonitor and ConfigValidator
Tests health status rules, forced reloads and schema validation
"""

import json

import pytest

from resource_search.services.config.config_monitor import (
    ConfigMonitor,
    ConfigStatus,
    get_config_monitor,
    init_config_monitor,
)
from resource_search.services.config.config_validator import ConfigValidator
from resource_search.services.config.weights_config_service import WeightsConfigService


@pytest.fixture
def loaded_service(weights_file):
    service = WeightsConfigService(weights_file)
    service.load()
    return service


@pytest.mark.unit
class TestConfigMonitor:
    """Test health reporting"""

    def test_healthy(self, loaded_service, weights_file):
        health = ConfigMonitor(loaded_service).check_weights_config()

        assert health.status == ConfigStatus.HEALTHY
        assert health.active_version == "2.1.0"
        assert health.using_fallback is False
        assert health.watching is False
        assert health.file_path == str(weights_file)
        assert health.file_size_bytes == weights_file.stat().st_size

    def test_error_when_fallback_active(self, tmp_path):
        service = WeightsConfigService(tmp_path / "missing.json")
        service.load()

        health = ConfigMonitor(service).check_weights_config()

        assert health.status == ConfigStatus.ERROR
        assert health.using_fallback is True
        assert health.file_size_bytes is None
        assert health.last_modified is None

    def test_warning_when_reload_failed(self, loaded_service, weights_file):
        weights_file.write_text("{broken")
        loaded_service.load()

        health = ConfigMonitor(loaded_service).check_weights_config()

        assert health.status == ConfigStatus.WARNING
        assert health.active_version == "2.1.0"
        assert health.last_error is not None

    def test_validation_errors_reported(self, loaded_service, weights_file, valid_weights_document):
        valid_weights_document["strategies"]["intent_driven"] = -1
        weights_file.write_text(json.dumps(valid_weights_document))
        loaded_service.load()

        health = ConfigMonitor(loaded_service).check_weights_config()

        assert health.validation_errors
        assert "strategies.intent_driven" in health.validation_errors[0]

    def test_forced_reload(self, loaded_service, weights_file, valid_weights_document):
        valid_weights_document["version"] = "5.0.0"
        weights_file.write_text(json.dumps(valid_weights_document))

        health = ConfigMonitor(loaded_service).reload_weights_config()

        assert health.active_version == "5.0.0"
        assert health.status == ConfigStatus.HEALTHY

    def test_to_dict(self, loaded_service):
        monitor = ConfigMonitor(loaded_service)

        payload = monitor.check_weights_config().to_dict()

        assert payload["config_name"] == "search_weights"
        assert payload["status"] == "healthy"
        assert isinstance(payload["last_validated"], str)

    def test_singleton(self, loaded_service):
        monitor = init_config_monitor(loaded_service)

        assert get_config_monitor() is monitor


@pytest.mark.unit
class TestConfigValidator:
    """Test JSON schema validation"""

    def test_valid_document(self, valid_weights_document):
        result = ConfigValidator().validate_weights_config(valid_weights_document)

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_every_violation_is_reported(self, valid_weights_document):
        del valid_weights_document["version"]
        valid_weights_document["geospatial"]["decay_offset"] = 60
        valid_weights_document["keyword_variations"]["nouns_multiplier"] = 1.5

        result = ConfigValidator().validate_weights_config(valid_weights_document)

        assert not result.is_valid
        assert len(result.errors) == 3
        assert result.to_dict()["error_count"] == 3

    def test_unknown_weight_key_rejected(self, valid_weights_document):
        valid_weights_document["semantic"]["location"] = 1.0

        assert not ConfigValidator().validate_weights_config(valid_weights_document).is_valid

    def test_missing_keyword_variations_warns(self, valid_weights_document):
        del valid_weights_document["keyword_variations"]

        result = ConfigValidator().validate_weights_config(valid_weights_document)

        assert result.is_valid
        assert len(result.warnings) == 1

    def test_validate_file(self, weights_file, tmp_path):
        validator = ConfigValidator()
        broken = tmp_path / "broken.json"
        broken.write_text("{")

        assert validator.validate_weights_file(weights_file).is_valid
        assert "Invalid JSON" in validator.validate_weights_file(broken).errors[0]
        assert "File not found" in validator.validate_weights_file(tmp_path / "nope.json").errors[0]

    def test_missing_schema_dir(self, tmp_path, valid_weights_document):
        result = ConfigValidator(schema_dir=tmp_path).validate_weights_config(valid_weights_document)

        assert not result.is_valid
        assert "not found" in result.errors[0]
