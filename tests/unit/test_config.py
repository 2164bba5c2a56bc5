"""
Unit tests for TraceConfig validation.
"""
import pytest
from tsc_trace_analyzer.core.types import DEFAULT_PERCENTILES, TraceConfig, get_phase


class TestTraceConfig:
    """Tests for TraceConfig defaults and validation."""

    def test_defaults(self):
        """Test default values."""
        config = TraceConfig()
        assert config.min_duration_ms == 0.0
        assert config.top_files == 20
        assert config.top_phase_files == 10
        assert config.location_threshold_ms == 0.1
        assert config.percentiles == DEFAULT_PERCENTILES
        assert config.project_root is None
        assert config.snippet_length == 200

    def test_percentiles_stored_as_tuple(self):
        """Test that a list of percentiles is frozen."""
        assert TraceConfig(percentiles=[10, 20]).percentiles == (10, 20)

    @pytest.mark.parametrize("kwargs", [
        {"min_duration_ms": -1},
        {"location_threshold_ms": -0.5},
        {"top_files": -1},
        {"top_phase_files": -3},
        {"snippet_length": 0},
        {"percentiles": [50, 101]},
        {"percentiles": [-1]},
    ])
    def test_invalid_values(self, kwargs):
        """Test that invalid options raise ValueError."""
        with pytest.raises(ValueError):
            TraceConfig(**kwargs)


class TestGetPhase:
    """Tests for category to phase mapping."""

    def test_phase_mapping(self):
        """Test that checkTypes counts as check and program has no phase."""
        assert get_phase("parse") == "parse"
        assert get_phase("checkTypes") == "check"
        assert get_phase("program") is None
