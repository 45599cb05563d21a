"""
Simulated network conditions for the tool layer.

Every tool call is delayed by a random latency, and every write may fail
transiently before commit. Tests construct a ``SimulatedNetwork`` with zero
latency and a fixed failure rate (0.0 or 1.0) for deterministic behavior.
"""

import logging
import random
import time
from typing import Any, Optional

from talentflow.models.errors import TransientWriteError

logger = logging.getLogger(__name__)


class SimulatedNetwork:
    """Latency and failure injection applied around store operations."""

    def __init__(
        self,
        failure_rate: float = 0.0,
        latency_min_ms: int = 0,
        latency_max_ms: int = 0,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            failure_rate: Probability in [0, 1] that a write fails
            latency_min_ms: Lower bound of the simulated delay
            latency_max_ms: Upper bound of the simulated delay
            rng: Random source (defaults to a fresh ``random.Random``)
        """
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError(f"failure_rate must be between 0 and 1, got {failure_rate}")
        if latency_min_ms < 0 or latency_max_ms < latency_min_ms:
            raise ValueError(
                f"Invalid latency bounds: min={latency_min_ms}ms, max={latency_max_ms}ms"
            )
        self.failure_rate = failure_rate
        self.latency_min_ms = latency_min_ms
        self.latency_max_ms = latency_max_ms
        self.rng = rng or random.Random()

    @classmethod
    def from_config(cls, config) -> "SimulatedNetwork":
        """Build a network from a ``Config`` instance."""
        return cls(
            failure_rate=config.failure_rate,
            latency_min_ms=config.latency_min_ms,
            latency_max_ms=config.latency_max_ms,
        )

    def delay(self) -> float:
        """
        Sleep for a random latency within the configured bounds.

        Returns:
            The delay in seconds
        """
        if self.latency_max_ms <= 0:
            return 0.0
        seconds = self.rng.uniform(self.latency_min_ms, self.latency_max_ms) / 1000.0
        time.sleep(seconds)
        return seconds

    def maybe_fail(self, operation: str, entity_id: Any = None) -> None:
        """
        Fail the current write with probability ``failure_rate``.

        Called inside the write's transaction, after the writes are staged
        and before commit.

        Raises:
            TransientWriteError: When the injected failure fires
        """
        if self.failure_rate <= 0.0:
            return
        if self.rng.random() < self.failure_rate:
            logger.warning("Injected transient failure for %s (%s)", operation, entity_id)
            raise TransientWriteError(
                f"Transient failure during {operation}; please retry",
                operation=operation,
                entity_id=entity_id,
            )
