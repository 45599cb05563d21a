"""
Configuration module for the TalentFlow MCP Server.

Provides centralized configuration management with support for:
- Environment variables (and a .env file at the repository root)
- Default values
- Path resolution
- Logging configuration
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from talentflow.db.record_store import resolve_db_path

# config.py is in talentflow/, so .env is in the parent directory
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)


def _parse_bool(env_var: str, default: bool) -> bool:
    """Parse a boolean value from an environment variable."""
    value = os.getenv(env_var)
    if value is None:
        return default
    return value.lower() in ("true", "1", "t", "y", "yes")


class Config:
    """
    Configuration class for MCP server settings.

    Supports configuration via environment variables (and .env file) with sensible defaults.
    All paths are resolved relative to the repository root.
    """

    def __init__(self):
        """Initialize configuration from environment variables and defaults."""
        self._repo_root = Path(__file__).resolve().parent.parent

        # Record store
        self.db_path = resolve_db_path()

        # Logging
        self.log_level = os.getenv("TALENTFLOW_LOG_LEVEL", "INFO").upper()
        self.log_file = self._resolve_log_path()

        # Server
        self.server_name = os.getenv("TALENTFLOW_SERVER_NAME", "talentflow-mcp-server")

        # Simulated network
        self.latency_min_ms = int(os.getenv("TALENTFLOW_LATENCY_MIN_MS", "200"))
        self.latency_max_ms = int(os.getenv("TALENTFLOW_LATENCY_MAX_MS", "1200"))
        self.failure_rate = float(os.getenv("TALENTFLOW_FAILURE_RATE", "0.08"))

        # Seeding
        self.seed_on_start = _parse_bool("TALENTFLOW_SEED_ON_START", True)
        self.seed_jobs = int(os.getenv("TALENTFLOW_SEED_JOBS", "25"))
        self.seed_candidates = int(os.getenv("TALENTFLOW_SEED_CANDIDATES", "1000"))

    def _resolve_log_path(self) -> Optional[Path]:
        """
        Resolve the log file path from environment.

        If TALENTFLOW_LOG_FILE is set, logs will be written to that file.
        Otherwise, logs go to stderr only.

        Returns:
            Path to log file, or None for stderr-only logging
        """
        log_env = os.getenv("TALENTFLOW_LOG_FILE")
        if not log_env:
            return None

        log_path = Path(log_env)
        if log_path.is_absolute():
            return log_path
        return self._repo_root / log_path

    def setup_logging(self):
        """
        Configure logging based on configuration settings.

        Sets up logging to stderr and optionally to a file.
        Log level is controlled by TALENTFLOW_LOG_LEVEL.
        """
        numeric_level = getattr(logging, self.log_level, logging.INFO)

        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)

        # Remove existing handlers to avoid duplicates
        root_logger.handlers.clear()

        # stdout carries the MCP stdio protocol, so logs go to stderr
        stderr_handler = logging.StreamHandler()
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(formatter)
        root_logger.addHandler(stderr_handler)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

            logging.info(f"Logging to file: {self.log_file}")

        logging.info(f"Log level set to: {self.log_level}")
        logging.info(f"Database path: {self.db_path}")

    def get_db_path_str(self) -> str:
        """Get database path as string for opening the record store."""
        return str(self.db_path)

    def validate(self) -> list[str]:
        """
        Validate configuration and return any warnings.

        Returns:
            List of warning messages (empty if all valid)
        """
        warnings = []

        if not 0.0 <= self.failure_rate <= 1.0:
            warnings.append(
                f"TALENTFLOW_FAILURE_RATE must be between 0 and 1, got {self.failure_rate}"
            )

        if self.latency_min_ms < 0 or self.latency_max_ms < self.latency_min_ms:
            warnings.append(
                f"Invalid latency bounds: min={self.latency_min_ms}ms, max={self.latency_max_ms}ms"
            )

        if self.seed_jobs < 0 or self.seed_candidates < 0:
            warnings.append(
                f"Seed counts must be non-negative "
                f"(jobs={self.seed_jobs}, candidates={self.seed_candidates})"
            )
        elif self.seed_on_start and self.seed_jobs == 0 and self.seed_candidates > 0:
            warnings.append("TALENTFLOW_SEED_CANDIDATES requires TALENTFLOW_SEED_JOBS > 0")

        if self.log_file:
            log_dir = self.log_file.parent
            if not log_dir.exists():
                try:
                    log_dir.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    warnings.append(f"Cannot create log directory {log_dir}: {e}")
            elif not os.access(log_dir, os.W_OK):
                warnings.append(f"Log directory not writable: {log_dir}")

        return warnings


_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the process-wide configuration, building it on first use.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
