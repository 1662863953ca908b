"""
Unit tests for WeightsConfigService
Tests loading, validation failures, last-known-good behavior and hot reload
"""

import asyncio
import json
import os

import pytest

from resource_search.services.config.weights_config_service import (
    WeightsConfigService,
    clear_weights_config_service,
    get_weights_config_service,
    init_weights_config_service,
)


def _rewrite(path, document, bump_seconds=10):
    """Write a new document and move the mtime forward"""
    stat = path.stat()
    path.write_text(json.dumps(document) if isinstance(document, dict) else document)
    new_mtime = stat.st_mtime + bump_seconds
    os.utime(path, (new_mtime, new_mtime))


@pytest.mark.unit
class TestLoad:
    """Test initial loading"""

    def test_valid_file(self, weights_file):
        service = WeightsConfigService(weights_file)

        assert service.load() is True
        assert service.get_version() == "2.1.0"
        assert service.using_fallback is False
        assert service.last_error is None
        assert service.last_loaded_at is not None
        weights = service.get_weights()
        assert weights.semantic.service == 1.5
        assert weights.geospatial.decay_scale == 25

    def test_defaults_before_load(self, weights_file):
        service = WeightsConfigService(weights_file)

        assert service.using_fallback is True
        assert service.get_version() == "1.0.0"
        assert service.get_weights().geospatial.weight == 2.0

    def test_missing_file_uses_defaults(self, tmp_path):
        service = WeightsConfigService(tmp_path / "missing.json")

        assert service.load() is False
        assert service.using_fallback is True
        assert "Failed to read" in service.last_error
        assert service.get_weights().keyword_variations.nouns_multiplier == 0.95

    def test_invalid_json_uses_defaults(self, tmp_path):
        path = tmp_path / "search_weights.json"
        path.write_text("{not json")

        service = WeightsConfigService(path)

        assert service.load() is False
        assert service.using_fallback is True

    def test_schema_violation_uses_defaults(self, tmp_path, valid_weights_document):
        valid_weights_document["semantic"]["service"] = 11
        path = tmp_path / "search_weights.json"
        path.write_text(json.dumps(valid_weights_document))

        service = WeightsConfigService(path)

        assert service.load() is False
        assert "failed validation" in service.last_error
        assert service.last_validation.is_valid is False

    def test_missing_keyword_variations_is_a_warning(self, tmp_path, valid_weights_document):
        del valid_weights_document["keyword_variations"]
        path = tmp_path / "search_weights.json"
        path.write_text(json.dumps(valid_weights_document))

        service = WeightsConfigService(path)

        assert service.load() is True
        assert service.last_validation.warnings
        assert service.get_weights().keyword_variations.stemmed_nouns_multiplier == 0.85

    def test_packaged_default_file_is_valid(self):
        service = WeightsConfigService()

        assert service.load() is True
        assert service.using_fallback is False


@pytest.mark.unit
class TestReload:
    """Test change detection and last-known-good behavior"""

    def test_unchanged_file_is_not_reloaded(self, weights_file):
        service = WeightsConfigService(weights_file)
        service.load()

        assert service.check_for_changes() is False

    def test_changed_file_is_reloaded(self, weights_file, valid_weights_document):
        service = WeightsConfigService(weights_file)
        service.load()
        valid_weights_document["version"] = "2.2.0"
        valid_weights_document["strategies"]["keyword_search"] = 3.0

        _rewrite(weights_file, valid_weights_document)

        assert service.check_for_changes() is True
        assert service.get_version() == "2.2.0"
        assert service.get_weights().strategies.keyword_search == 3.0

    def test_invalid_reload_keeps_last_good(self, weights_file, valid_weights_document):
        service = WeightsConfigService(weights_file)
        service.load()
        valid_weights_document["version"] = "3.0.0"
        valid_weights_document["geospatial"]["decay_scale"] = 500

        _rewrite(weights_file, valid_weights_document)
        service.check_for_changes()

        assert service.get_version() == "2.1.0"
        assert service.using_fallback is False
        assert service.last_error is not None

    def test_failed_file_is_not_retried_until_it_changes(self, weights_file):
        service = WeightsConfigService(weights_file)
        service.load()
        _rewrite(weights_file, "{broken")
        service.check_for_changes()

        assert service.check_for_changes() is False

    def test_recovery_clears_error(self, weights_file, valid_weights_document):
        service = WeightsConfigService(weights_file)
        service.load()
        _rewrite(weights_file, "{broken")
        service.check_for_changes()

        _rewrite(weights_file, valid_weights_document)
        service.check_for_changes()

        assert service.last_error is None

    def test_snapshots_are_replaced_not_mutated(self, weights_file, valid_weights_document):
        service = WeightsConfigService(weights_file)
        service.load()
        before = service.get_weights()
        valid_weights_document["semantic"]["service"] = 9.0

        _rewrite(weights_file, valid_weights_document)
        service.check_for_changes()

        assert before.semantic.service == 1.5
        assert service.get_weights().semantic.service == 9.0

    @pytest.mark.asyncio
    async def test_watcher_picks_up_changes(self, weights_file, valid_weights_document):
        service = WeightsConfigService(weights_file, poll_interval_seconds=0.01)
        service.load()
        service.start_watching()
        assert service.is_watching

        valid_weights_document["version"] = "4.0.0"
        _rewrite(weights_file, valid_weights_document)
        for _ in range(100):
            if service.get_version() == "4.0.0":
                break
            await asyncio.sleep(0.01)

        await service.stop_watching()

        assert service.get_version() == "4.0.0"
        assert not service.is_watching


@pytest.mark.unit
class TestSingleton:
    """Test singleton helpers"""

    def test_init_and_get(self, weights_file):
        service = init_weights_config_service(weights_file, poll_interval_seconds=1)

        assert get_weights_config_service() is service
        assert service.get_version() == "2.1.0"

    def test_env_path(self, weights_file, monkeypatch):
        monkeypatch.setenv("WEIGHTS_CONFIG_PATH", str(weights_file))
        clear_weights_config_service()

        assert get_weights_config_service().config_path == weights_file
