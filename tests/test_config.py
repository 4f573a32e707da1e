"""
Unity Ledger Configuration Tests
"""

import logging

import pytest

from unity.config import (
    FieldConfig,
    LogConfig,
    UnityConfig,
    setup_logging,
)
from unity.constants import DEFAULT_P, DEFAULT_Q, TEST_P, TEST_Q
from unity.errors import ConfigError, ErrorCode


class TestUnityConfig:
    """Tests for configuration presets and validation."""

    def test_default(self):
        config = UnityConfig.default()
        assert config.params.p == DEFAULT_P
        assert config.params.q == DEFAULT_Q
        assert config.ledger.enforce_spendable is False
        assert config.validate() == []

    def test_small_test(self):
        config = UnityConfig.small_test()
        assert config.params == FieldConfig(p=TEST_P, q=TEST_Q)
        assert config.log.level == "DEBUG"
        assert config.validate() == []

    def test_presets_are_independent(self):
        a = UnityConfig.small_test()
        a.vdf.max_steps = 5
        assert UnityConfig.small_test().vdf.max_steps != 5
        assert UnityConfig.default().vdf.max_steps != 5

    def test_q_too_small(self):
        config = UnityConfig()
        config.params = FieldConfig(p=TEST_P, q=TEST_P ** 3)
        assert any("q must exceed" in e for e in config.validate())

    def test_invalid_values(self):
        config = UnityConfig()
        config.params = FieldConfig(p=2, q=DEFAULT_Q)
        config.vdf.max_steps = 0
        config.vdf.progress_interval = 0
        config.vdf.cancel_check_interval = 0
        config.log.level = "LOUD"
        assert len(config.validate()) == 5

    def test_check_raises(self):
        config = UnityConfig()
        config.vdf.max_steps = 0
        with pytest.raises(ConfigError) as exc:
            config.check()
        assert exc.value.code == ErrorCode.INVALID_CONFIG
        assert exc.value.details["errors"]

    def test_check_returns_self(self):
        config = UnityConfig.small_test()
        assert config.check() is config

    def test_save_load(self, tmp_path):
        config = UnityConfig.small_test()
        config.ledger.enforce_spendable = True
        path = tmp_path / "unity.json"

        config.save(str(path))
        loaded = UnityConfig.load(str(path))

        assert loaded.to_dict() == config.to_dict()
        assert loaded.params.q == TEST_Q

    def test_load_partial(self, tmp_path):
        path = tmp_path / "partial.json"
        path.write_text('{"ledger": {"enforce_spendable": true}}')

        loaded = UnityConfig.load(str(path))
        assert loaded.ledger.enforce_spendable is True
        assert loaded.params.p == DEFAULT_P


class TestLogging:
    """Tests for setup_logging."""

    @pytest.fixture
    def package_logger(self):
        logger = logging.getLogger("unity")
        level = logger.level
        yield logger
        for handler in [h for h in logger.handlers if getattr(h, "_unity", False)]:
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(level)

    def test_file_handler(self, tmp_path, package_logger):
        path = tmp_path / "unity.log"
        logger = setup_logging(LogConfig(level="DEBUG", console=False, file=str(path)))
        assert logger is package_logger

        logging.getLogger("unity.crypto.vdf").debug("hello")
        for handler in logger.handlers:
            handler.flush()

        text = path.read_text()
        assert "hello" in text
        assert "unity.crypto.vdf" in text

    def test_repeated_setup_replaces_handlers(self, tmp_path, package_logger):
        own = logging.NullHandler()
        package_logger.addHandler(own)
        try:
            setup_logging(LogConfig(file=str(tmp_path / "a.log")))
            setup_logging(LogConfig(file=str(tmp_path / "b.log")))
            installed = [h for h in package_logger.handlers if getattr(h, "_unity", False)]
            assert len(installed) == 2
            assert own in package_logger.handlers
        finally:
            package_logger.removeHandler(own)

    def test_level(self, package_logger):
        setup_logging(LogConfig(level="warning", console=False))
        assert package_logger.level == logging.WARNING

    def test_invalid_rotation(self, tmp_path):
        config = UnityConfig.small_test()
        config.log.file = str(tmp_path / "unity.log")
        config.log.max_size_mb = 0
        assert any("rotation" in e for e in config.validate())
