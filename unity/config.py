"""
Unity Ledger Configuration
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field, asdict
from typing import List, Optional

from unity.constants import (
    DEFAULT_P,
    DEFAULT_Q,
    TEST_P,
    TEST_Q,
    VDF_MAX_STEPS,
    VDF_PROGRESS_INTERVAL,
    VDF_CANCEL_CHECK_INTERVAL,
    LOGGER_NAME,
)
from unity.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class FieldConfig:
    """Field parameters shared by every component of one ledger."""
    p: int = DEFAULT_P
    q: int = DEFAULT_Q


@dataclass
class VDFConfig:
    """VDF configuration."""
    max_steps: int = VDF_MAX_STEPS
    progress_interval: int = VDF_PROGRESS_INTERVAL
    cancel_check_interval: int = VDF_CANCEL_CHECK_INTERVAL


@dataclass
class LedgerConfig:
    """Ledger policy."""
    enforce_spendable: bool = False


@dataclass
class LogConfig:
    """
    Logging for the `unity` logger tree.

    Verification failures log at DEBUG; rejected appends and observer
    failures at WARNING.
    """
    level: str = "INFO"
    console: bool = True
    file: Optional[str] = None
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    max_size_mb: int = 10
    backup_count: int = 3


@dataclass
class UnityConfig:
    """
    Complete ledger configuration.

    Field parameters are fixed for the lifetime of a ledger instance;
    independent instances may use different parameters.
    """
    name: str = "unity-ledger"

    params: FieldConfig = field(default_factory=FieldConfig)
    vdf: VDFConfig = field(default_factory=VDFConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.params.p < 3:
            errors.append(f"p must be at least 3: {self.params.p}")

        if self.params.q <= 4 * self.params.p ** 3:
            errors.append("q must exceed 4 * p**3 for decryption and signatures to hold")

        if self.vdf.max_steps < 1:
            errors.append("vdf.max_steps must be at least 1")

        if self.vdf.progress_interval < 1:
            errors.append("vdf.progress_interval must be at least 1")

        if self.vdf.cancel_check_interval < 1:
            errors.append("vdf.cancel_check_interval must be at least 1")

        if not isinstance(logging.getLevelName(self.log.level.upper()), int):
            errors.append(f"Unknown log level: {self.log.level}")

        if self.log.file and (self.log.max_size_mb < 1 or self.log.backup_count < 0):
            errors.append("log rotation needs max_size_mb >= 1 and backup_count >= 0")

        return errors

    def check(self) -> UnityConfig:
        """Raise ConfigError unless the configuration is valid."""
        errors = self.validate()
        if errors:
            raise ConfigError(errors)
        return self

    def save(self, path: str) -> None:
        """Save configuration to file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: str) -> UnityConfig:
        """Load configuration from file."""
        with open(path, 'r') as f:
            data = json.load(f)

        config = cls(name=data.get("name", "unity-ledger"))

        if "params" in data:
            config.params = FieldConfig(**data["params"])

        if "vdf" in data:
            config.vdf = VDFConfig(**data["vdf"])

        if "ledger" in data:
            config.ledger = LedgerConfig(**data["ledger"])

        if "log" in data:
            config.log = LogConfig(**data["log"])

        logger.info(f"Configuration loaded from {path}")
        return config

    @classmethod
    def default(cls) -> UnityConfig:
        """Production parameters: p = 2**256 - 587, q = 2**1279 - 1."""
        return cls()

    @classmethod
    def small_test(cls) -> UnityConfig:
        """Small primes for fast tests. Not secure."""
        config = cls(name="unity-test")
        config.params = FieldConfig(p=TEST_P, q=TEST_Q)
        config.vdf.max_steps = 1 << 16
        config.log.level = "DEBUG"
        return config

    def to_dict(self) -> dict:
        """Export configuration as dictionary."""
        return {
            "name": self.name,
            "params": asdict(self.params),
            "vdf": asdict(self.vdf),
            "ledger": asdict(self.ledger),
            "log": asdict(self.log),
        }


def setup_logging(config: LogConfig) -> logging.Logger:
    """
    Attach handlers to the `unity` logger.

    Calling it again replaces the handlers installed by the previous call;
    handlers added by the application are left alone.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    for handler in [h for h in package_logger.handlers if getattr(h, "_unity", False)]:
        package_logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = []
    if config.console:
        handlers.append(logging.StreamHandler())

    if config.file:
        from logging.handlers import RotatingFileHandler
        handlers.append(RotatingFileHandler(
            config.file,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        ))

    formatter = logging.Formatter(config.format)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._unity = True
        package_logger.addHandler(handler)

    return package_logger
