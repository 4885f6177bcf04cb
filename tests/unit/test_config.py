"""Tests for validation configuration and environment settings."""

import pytest

from scholarly_integrity.config.settings import Settings
from scholarly_integrity.config.validation import ValidationConfig, load_config
from scholarly_integrity.errors import ConfigurationError
from scholarly_integrity.registry import JaccardSimilarity, TokenContainmentSimilarity
from scholarly_integrity.state import ParadigmProfile, SectionProfile


class TestValidationConfig:
    """Tests for ValidationConfig construction."""

    def test_defaults(self):
        """Test default thresholds and tables."""
        config = ValidationConfig()

        assert config.support_score_floor == 0.25
        assert config.corroboration_floor == 0.5
        assert config.similarity_metric == "token_containment"
        assert config.per_source_timeout_ms == 2000
        assert config.default_paradigm == "pragmatic"
        assert config.risk_thresholds.none_at == 0.75
        assert isinstance(config.metric(), TokenContainmentSimilarity)

    def test_out_of_range_floor(self):
        """Test invalid values raise ConfigurationError, not a pydantic error."""
        with pytest.raises(ConfigurationError) as exc_info:
            ValidationConfig(support_score_floor=1.5)
        assert "support_score_floor" in exc_info.value.message

    def test_non_positive_timeout(self):
        """Test the lookup deadline must be positive."""
        with pytest.raises(ConfigurationError):
            ValidationConfig(per_source_timeout_ms=0)

    def test_unknown_metric_name(self):
        """Test unknown metric names are rejected."""
        with pytest.raises(ConfigurationError):
            ValidationConfig(similarity_metric="levenshtein")

    def test_embedding_name_needs_instance(self):
        """Test the embedding metric cannot be selected by name alone."""
        with pytest.raises(ConfigurationError):
            ValidationConfig(similarity_metric="embedding")

    def test_metric_name_normalized(self):
        """Test metric names ignore case and surrounding whitespace."""
        config = ValidationConfig(similarity_metric=" Jaccard ")
        assert config.similarity_metric == "jaccard"
        assert isinstance(config.metric(), JaccardSimilarity)

    def test_metric_instance(self):
        """Test a metric instance is used as given."""
        metric = JaccardSimilarity()
        assert ValidationConfig(similarity_metric=metric).metric() is metric

    def test_misordered_risk_thresholds(self):
        """Test risk thresholds must descend."""
        with pytest.raises(ConfigurationError):
            ValidationConfig(risk_thresholds={"none_at": 0.3, "low_at": 0.5, "moderate_at": 0.1})

    def test_default_paradigm_normalized(self):
        """Test the default paradigm is matched in table form."""
        assert ValidationConfig(default_paradigm="Critical Theory").default_paradigm == "critical-theory"

    def test_default_paradigm_must_exist(self):
        """Test the default paradigm must be in the paradigm table."""
        with pytest.raises(ConfigurationError):
            ValidationConfig(default_paradigm="astrology")

    def test_paradigm_with_unknown_skill(self):
        """Test paradigm skills must exist in the skill table."""
        table = [ParadigmProfile(name="pragmatic", skills=["juggle"])]
        with pytest.raises(ConfigurationError):
            ValidationConfig(paradigm_table=table)

    def test_section_with_unknown_default_skill(self):
        """Test catalogue default skills must exist in the skill table."""
        catalog = [SectionProfile(name="Introduction", default_skills=["inform", "daydream"])]
        with pytest.raises(ConfigurationError):
            ValidationConfig(section_catalog=catalog)

    def test_duplicate_cognitive_steps(self):
        """Test cognitive steps must be unique."""
        with pytest.raises(ConfigurationError):
            ValidationConfig(cognitive_steps=["Assessment", "Assessment"])

    def test_custom_paradigm_table(self):
        """Test a custom table with a matching default paradigm is accepted."""
        table = [ParadigmProfile(name="empiricist", keywords=["observ"], skills=["analyze"])]
        config = ValidationConfig(paradigm_table=table, default_paradigm="Empiricist")
        assert [p.name for p in config.paradigm_table] == ["empiricist"]


class TestLoadConfig:
    """Tests for load_config."""

    def test_none_gives_defaults(self):
        """Test None resolves to the default config."""
        assert load_config(None) == ValidationConfig()

    def test_instance_passes_through(self):
        """Test an existing config is returned unchanged."""
        config = ValidationConfig(pass_threshold=0.8)
        assert load_config(config) is config

    def test_mapping(self):
        """Test a plain mapping is validated into a config."""
        config = load_config({"corroboration_floor": 0.6, "similarity_metric": "jaccard"})
        assert config.corroboration_floor == 0.6
        assert config.similarity_metric == "jaccard"

    def test_unknown_field(self):
        """Test unknown fields are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config({"support_floor": 0.3})
        assert exc_info.value.details["unknown"] == ["support_floor"]

    def test_wrong_type(self):
        """Test non-mapping configs are rejected."""
        with pytest.raises(ConfigurationError):
            load_config(["support_score_floor", 0.3])


class TestFromSettings:
    """Tests for building a config from environment settings."""

    def test_settings_values_used(self):
        """Test settings map onto config fields."""
        settings = Settings(
            support_score_floor=0.3,
            corroboration_floor=0.55,
            similarity_metric="jaccard",
            source_timeout_ms=500,
            pass_threshold=0.8,
        )
        config = ValidationConfig.from_settings(settings)

        assert config.support_score_floor == 0.3
        assert config.corroboration_floor == 0.55
        assert config.similarity_metric == "jaccard"
        assert config.per_source_timeout_ms == 500
        assert config.pass_threshold == 0.8

    def test_overrides_win(self):
        """Test explicit overrides take precedence over settings."""
        config = ValidationConfig.from_settings(Settings(), pass_threshold=0.9)
        assert config.pass_threshold == 0.9

    def test_invalid_settings(self):
        """Test out-of-range settings are reported together."""
        settings = Settings(support_score_floor=2.0, source_timeout_ms=-1)
        assert len(settings.validate()) == 2
        with pytest.raises(ConfigurationError):
            ValidationConfig.from_settings(settings)
