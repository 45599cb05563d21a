"""
Tests for the simulated network.
"""

import random
from unittest.mock import patch

import pytest

from talentflow.models.errors import ErrorCode, TransientWriteError
from talentflow.utils.transport import SimulatedNetwork


class TestMaybeFail:
    def test_never_fails_at_zero_rate(self):
        network = SimulatedNetwork(failure_rate=0.0)
        for _ in range(100):
            network.maybe_fail("update_job", "job-1")

    def test_always_fails_at_full_rate(self):
        network = SimulatedNetwork(failure_rate=1.0)

        with pytest.raises(TransientWriteError) as exc_info:
            network.maybe_fail("update_job", "job-1")

        error = exc_info.value
        assert error.code == ErrorCode.TRANSIENT_WRITE
        assert error.retryable is True
        assert error.operation == "update_job"
        assert error.entity_id == "job-1"

    def test_rate_is_roughly_respected(self):
        """Test the observed failure frequency tracks the configured rate."""
        network = SimulatedNetwork(failure_rate=0.25, rng=random.Random(42))
        failures = 0
        for _ in range(2000):
            try:
                network.maybe_fail("create_job")
            except TransientWriteError:
                failures += 1

        assert 400 < failures < 600

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_invalid_rate(self, rate):
        with pytest.raises(ValueError):
            SimulatedNetwork(failure_rate=rate)


class TestDelay:
    def test_zero_latency_does_not_sleep(self):
        with patch("talentflow.utils.transport.time.sleep") as sleep:
            assert SimulatedNetwork().delay() == 0.0
        sleep.assert_not_called()

    def test_delay_within_bounds(self):
        network = SimulatedNetwork(latency_min_ms=200, latency_max_ms=1200, rng=random.Random(1))

        with patch("talentflow.utils.transport.time.sleep") as sleep:
            seconds = network.delay()

        assert 0.2 <= seconds <= 1.2
        sleep.assert_called_once_with(seconds)

    def test_inverted_bounds(self):
        with pytest.raises(ValueError):
            SimulatedNetwork(latency_min_ms=500, latency_max_ms=100)
