"""Tests for configuration loading."""

import pytest
import yaml
from pydantic import ValidationError

from annbench.core.config import (
    Config,
    IndexSettings,
    get_default_config,
    get_default_config_path,
    load_config,
    merge_configs,
)
from annbench.core.errors import ConfigurationError
from annbench.core.types import DistanceMetric
from annbench.indexes import make_index_from_config


class TestConfigModels:
    """Test pydantic configuration models."""

    def test_defaults(self):
        config = get_default_config()
        assert config.index.metric == "cosine"
        assert config.index.max_links is None
        assert config.experiment.seed == 42
        assert config.experiment.control_size is None
        assert config.dataset.path is None

    def test_enum_tokens_accepted(self):
        settings = IndexSettings(
            metric="dot_product",
            insert_method="link_diverse",
            remove_method="no_link",
        )
        assert settings.metric == "dot_product"
        assert settings.insert_method == "link_diverse"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("metric", "manhattan"),
            ("insert_method", "link_random"),
            ("remove_method", "compensate_incomming_links"),
        ],
    )
    def test_unknown_tokens_fail_when_index_is_built(self, field, value):
        """Tokens are checked by make_index, which raises ConfigurationError unwrapped."""
        settings = IndexSettings(**{field: value})
        assert getattr(settings, field) == value

        with pytest.raises(ConfigurationError) as exc_info:
            make_index_from_config(settings)
        assert exc_info.value.field == field
        assert exc_info.value.value == value

    def test_metric_case_insensitive(self):
        index = make_index_from_config(IndexSettings(metric="COSINE"))
        assert index.metric == DistanceMetric.COSINE

    def test_range_validation(self):
        with pytest.raises(ValidationError):
            Config(experiment={"remove_fraction": 1.5})
        with pytest.raises(ValidationError):
            Config(index={"max_links": 1})

    def test_log_level_normalized(self):
        assert Config(output={"log_level": "debug"}).output.log_level == "DEBUG"
        with pytest.raises(ValidationError):
            Config(output={"log_level": "chatty"})

    def test_unknown_distribution(self):
        with pytest.raises(ValidationError):
            Config(dataset={"distribution": "zipf"})


class TestLoadConfig:
    """Test YAML loading."""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text(yaml.safe_dump({
            "index": {"metric": "dot_product", "max_links": 12},
            "experiment": {"seed": 7, "control_size": 5},
        }))

        config = load_config(path)

        assert config.index.metric == "dot_product"
        assert config.index.max_links == 12
        assert config.index.ef_construction is None
        assert config.experiment.seed == 7
        assert config.experiment.control_size == 5

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == Config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_unknown_token_in_yaml_loads(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text(yaml.safe_dump({"index": {"insert_method": "link_random"}}))

        config = load_config(path)

        with pytest.raises(ConfigurationError, match="link_random"):
            make_index_from_config(config.index)

    def test_default_file_loads(self):
        assert get_default_config_path().exists()
        config = load_config()
        assert config.index.metric in ("cosine", "dot_product")


class TestMergeConfigs:
    """Test dictionary merging."""

    def test_nested_merge(self):
        base = {"index": {"metric": "cosine", "max_links": 16}, "output": {"log_level": "INFO"}}
        override = {"index": {"max_links": 8}}

        merged = merge_configs(base, override)

        assert merged == {"index": {"metric": "cosine", "max_links": 8}, "output": {"log_level": "INFO"}}

    def test_none_values_skipped(self):
        merged = merge_configs({"index": {"max_links": 16}}, {"index": {"max_links": None}})
        assert merged["index"]["max_links"] == 16

    def test_base_not_mutated(self):
        base = {"index": {"max_links": 16}}
        merge_configs(base, {"index": {"max_links": 4}})
        assert base["index"]["max_links"] == 16


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
