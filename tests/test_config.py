"""Tests for GraphConfig."""

import pytest

from actor_graph.config import GraphConfig


class TestDefaults:
    def test_defaults(self, config):
        defaults = GraphConfig()
        assert defaults.min_lookup_interval == 0.1
        assert defaults.request_timeout is None
        assert defaults.cache_failed_lookups is True
        assert defaults.fuzzy_min_length == 3
        assert defaults.fuzzy_scan_order == "insertion"
        assert (defaults.node_weight_min, defaults.node_weight_max) == (8.0, 25.0)


class TestOverrides:
    def test_kwargs(self, config):
        cfg = GraphConfig(fuzzy_min_length=5, classify_concurrency=2)
        assert cfg.fuzzy_min_length == 5
        assert cfg.classify_concurrency == 2

    def test_unknown_option_rejected(self, config):
        with pytest.raises(ValueError, match="Unknown configuration option"):
            GraphConfig(fuzzy_threshold=0.5)

    def test_invalid_scan_order_rejected(self, config):
        with pytest.raises(ValueError, match="fuzzy_scan_order"):
            GraphConfig(fuzzy_scan_order="random")

    def test_environment(self, config, monkeypatch):
        monkeypatch.setenv("ACTOR_GRAPH_MIN_LOOKUP_INTERVAL", "0.5")
        monkeypatch.setenv("ACTOR_GRAPH_CACHE_FAILED_LOOKUPS", "false")
        monkeypatch.setenv("ACTOR_GRAPH_REQUEST_TIMEOUT", "12")
        monkeypatch.setenv("ACTOR_GRAPH_CATALOG", "/data/catalog.json")

        cfg = GraphConfig.from_env()

        assert cfg.min_lookup_interval == 0.5
        assert cfg.cache_failed_lookups is False
        assert cfg.request_timeout == 12.0
        assert cfg.catalog_path == "/data/catalog.json"

    def test_kwargs_beat_environment(self, config, monkeypatch):
        monkeypatch.setenv("ACTOR_GRAPH_FUZZY_MIN_LENGTH", "7")
        assert GraphConfig(fuzzy_min_length=4).fuzzy_min_length == 4

    def test_with_overrides(self, config):
        updated = config.with_overrides(cache_failed_lookups=False)
        assert updated.cache_failed_lookups is False
        assert config.cache_failed_lookups is True
        assert updated.min_lookup_interval == config.min_lookup_interval


class TestFiles:
    def test_from_file_flattens_sections(self, config, tmp_path):
        path = tmp_path / "actor_graph.toml"
        path.write_text(
            "[classification]\n"
            "min_lookup_interval = 0.25\n"
            "cache_failed_lookups = false\n"
            "\n"
            "[matching]\n"
            'fuzzy_scan_order = "longest_first"\n'
        )

        cfg = GraphConfig.from_file(path)

        assert cfg.min_lookup_interval == 0.25
        assert cfg.cache_failed_lookups is False
        assert cfg.fuzzy_scan_order == "longest_first"

    def test_from_file_missing(self, config, tmp_path):
        with pytest.raises(FileNotFoundError):
            GraphConfig.from_file(tmp_path / "missing.toml")

    def test_round_trip(self, config, tmp_path):
        path = tmp_path / "out" / "actor_graph.toml"
        original = GraphConfig(fuzzy_min_length=4, node_weight_max=30.0)

        original.to_file(path)
        loaded = GraphConfig.from_file(path)

        assert loaded.fuzzy_min_length == 4
        assert loaded.node_weight_max == 30.0
        assert loaded.request_timeout is None
