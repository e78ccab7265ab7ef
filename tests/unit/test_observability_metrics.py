"""Unit tests for Prometheus metrics module."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from prometheus_client import REGISTRY

from joshua.config.settings import Settings, get_settings
from joshua.observability import metrics
from joshua.observability.metrics import (
    LATENCY_BUCKETS,
    METRIC_PREFIX,
    MetricsConfig,
    MetricsManager,
    create_metrics_manager,
    get_metrics,
    get_metrics_manager,
    observe_risk_calculation,
    record_analysis_run,
    record_consensus,
    record_high_divergence,
    record_risk_result,
)


def sample(name: str, labels: dict[str, str] | None = None) -> float:
    """Current value of a sample in the default registry."""
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


@pytest.fixture(autouse=True)
def restore_metrics_manager() -> Generator[None, None, None]:
    """Restore the global metrics manager after each test."""
    saved = metrics._metrics_manager
    yield
    metrics._metrics_manager = saved


@pytest.fixture
def enabled_manager() -> MetricsManager:
    """Install an enabled metrics manager."""
    return create_metrics_manager(MetricsConfig(enabled=True))


@pytest.fixture
def disabled_manager() -> MetricsManager:
    """Install a disabled metrics manager."""
    return create_metrics_manager(MetricsConfig(enabled=False))


class TestMetricsConfig:
    """Tests for MetricsConfig."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = MetricsConfig()

        assert config.enabled is True
        assert METRIC_PREFIX == "joshua"
        assert len(LATENCY_BUCKETS) > 0

    def test_from_settings(self) -> None:
        """Test the enabled flag follows application settings."""
        settings = Settings(metrics_enabled=False, _env_file=None)

        assert MetricsConfig.from_settings(settings).enabled is False

    def test_from_settings_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the environment variable reaches the config through Settings."""
        monkeypatch.setenv("JOSHUA_METRICS_ENABLED", "false")

        assert MetricsConfig.from_settings().enabled is False

    def test_from_settings_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test metrics are enabled by default."""
        monkeypatch.delenv("JOSHUA_METRICS_ENABLED", raising=False)

        assert MetricsConfig.from_settings(Settings(_env_file=None)).enabled is True


class TestDefaultManagerFromSettings:
    """Tests for the lazily created global manager."""

    def test_env_file_disables_recording(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test metrics_enabled=false in .env stops the helpers from counting."""
        monkeypatch.delenv("JOSHUA_METRICS_ENABLED", raising=False)
        (tmp_path / ".env").write_text("JOSHUA_METRICS_ENABLED=false\n")
        monkeypatch.chdir(tmp_path)
        metrics._metrics_manager = None

        assert get_settings().metrics_enabled is False
        assert get_metrics_manager().config.enabled is False

        before = sample("joshua_consensus_high_divergence_total")
        before_runs = sample("joshua_analysis_runs_total", {"status": "success"})
        record_high_divergence()
        record_analysis_run("success")

        assert sample("joshua_consensus_high_divergence_total") == before
        assert sample("joshua_analysis_runs_total", {"status": "success"}) == before_runs

    def test_env_var_disables_recording(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test JOSHUA_METRICS_ENABLED=false disables the default manager."""
        monkeypatch.setenv("JOSHUA_METRICS_ENABLED", "false")
        metrics._metrics_manager = None

        before = sample("joshua_consensus_builds_total", {"status": "success"})
        record_consensus("success", divergence=5)

        assert get_metrics_manager().config.enabled is False
        assert sample("joshua_consensus_builds_total", {"status": "success"}) == before

    def test_enabled_by_default(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test the default manager records when nothing disables it."""
        monkeypatch.delenv("JOSHUA_METRICS_ENABLED", raising=False)
        monkeypatch.chdir(tmp_path)
        metrics._metrics_manager = None

        before = sample("joshua_consensus_high_divergence_total")
        record_high_divergence()

        assert get_metrics_manager().config.enabled is True
        assert sample("joshua_consensus_high_divergence_total") == before + 1


class TestMetricsManager:
    """Tests for MetricsManager."""

    def test_create_manager(self) -> None:
        """Test creating metrics manager."""
        config = MetricsConfig()
        manager = MetricsManager(config)

        assert manager.config == config
        assert manager._initialized is False

    def test_initialize(self, enabled_manager: MetricsManager) -> None:
        """Test initialization publishes service info once."""
        enabled_manager.initialize(service_version="1.2.3", environment="testing")

        assert enabled_manager._initialized is True
        assert (
            sample(
                "joshua_service_info",
                {"name": "joshua", "version": "1.2.3", "environment": "testing"},
            )
            == 1.0
        )

    def test_initialize_disabled(self, disabled_manager: MetricsManager) -> None:
        """Test a disabled manager skips initialization."""
        disabled_manager.initialize()

        assert disabled_manager._initialized is False

    def test_create_replaces_global(self) -> None:
        """Test create_metrics_manager installs the global manager."""
        manager = create_metrics_manager(MetricsConfig(enabled=False))

        assert get_metrics_manager() is manager

    def test_get_metrics_output(self, enabled_manager: MetricsManager) -> None:
        """Test exposition output contains the engine metrics."""
        output = get_metrics()

        assert isinstance(output, bytes)
        assert b"joshua_risk_calculation_duration_seconds" in output
        assert b"joshua_consensus_builds" in output


class TestRecordingHelpers:
    """Tests for metric recording helpers."""

    def test_observe_risk_calculation_success(self, enabled_manager: MetricsManager) -> None:
        """Test a successful calculation is timed under status=success."""
        labels = {"status": "success"}
        before = sample("joshua_risk_calculation_duration_seconds_count", labels)

        with observe_risk_calculation() as ctx:
            assert ctx["status"] == "success"

        after = sample("joshua_risk_calculation_duration_seconds_count", labels)
        assert after == before + 1

    def test_observe_risk_calculation_error(self, enabled_manager: MetricsManager) -> None:
        """Test a failing calculation is timed under status=error."""
        labels = {"status": "error"}
        before = sample("joshua_risk_calculation_duration_seconds_count", labels)

        with pytest.raises(ValueError), observe_risk_calculation():
            raise ValueError("boom")

        after = sample("joshua_risk_calculation_duration_seconds_count", labels)
        assert after == before + 1

    def test_record_risk_result(self, enabled_manager: MetricsManager) -> None:
        """Test level counter and scaled value histogram."""
        labels = {"level": "severe", "trend": "deteriorating"}
        before_level = sample("joshua_risk_level_total", labels)
        before_sum = sample("joshua_risk_scaled_value_seconds_sum")

        record_risk_result(150, "severe", "deteriorating")

        assert sample("joshua_risk_level_total", labels) == before_level + 1
        assert sample("joshua_risk_scaled_value_seconds_sum") == before_sum + 150

    def test_record_consensus(self, enabled_manager: MetricsManager) -> None:
        """Test consensus counter and divergence histogram."""
        before = sample("joshua_consensus_builds_total", {"status": "success"})
        before_div = sample("joshua_consensus_divergence_seconds_count")

        record_consensus("success", divergence=7)

        assert sample("joshua_consensus_builds_total", {"status": "success"}) == before + 1
        assert sample("joshua_consensus_divergence_seconds_count") == before_div + 1

    def test_record_consensus_without_divergence(self, enabled_manager: MetricsManager) -> None:
        """Test an insufficient build does not observe divergence."""
        before_div = sample("joshua_consensus_divergence_seconds_count")

        record_consensus("insufficient")

        assert sample("joshua_consensus_divergence_seconds_count") == before_div

    def test_record_high_divergence(self, enabled_manager: MetricsManager) -> None:
        """Test the high divergence counter."""
        before = sample("joshua_consensus_high_divergence_total")

        record_high_divergence()

        assert sample("joshua_consensus_high_divergence_total") == before + 1

    def test_record_analysis_run(self, enabled_manager: MetricsManager) -> None:
        """Test the analysis run counter."""
        before = sample("joshua_analysis_runs_total", {"status": "timeout"})

        record_analysis_run("timeout")

        assert sample("joshua_analysis_runs_total", {"status": "timeout"}) == before + 1

    def test_disabled_records_nothing(self, disabled_manager: MetricsManager) -> None:
        """Test helpers are no-ops when metrics are disabled."""
        before = sample("joshua_consensus_high_divergence_total")
        before_runs = sample("joshua_analysis_runs_total", {"status": "error"})

        record_high_divergence()
        record_analysis_run("error")
        with observe_risk_calculation():
            pass

        assert sample("joshua_consensus_high_divergence_total") == before
        assert sample("joshua_analysis_runs_total", {"status": "error"}) == before_runs
