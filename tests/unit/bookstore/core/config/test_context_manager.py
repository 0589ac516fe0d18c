"""Unit tests for the application context manager."""

import asyncio

import pytest

from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import (
    AppContext,
    get_config,
    get_context,
    set_config,
    set_context,
    with_context,
)


class TestContextManager:
    """Test the context manager functionality."""

    def test_default_context_available(self):
        context = get_context()
        config = get_config()

        assert isinstance(context, AppContext)
        assert isinstance(config, ConfigData)
        assert context.config is config

    def test_with_context_override_single_level(self):
        """Should override config for the duration of the context manager."""
        original_config = get_config()
        original_level = original_config.logging.level

        test_config = ConfigData()
        test_config.logging.level = "TRACE"

        with with_context(test_config):
            override_config = get_config()
            assert override_config.logging.level == "TRACE"
            assert override_config is not original_config

        after_config = get_config()
        assert after_config.logging.level == original_level
        assert after_config is original_config

    def test_partial_override_inherits_other_values(self):
        original_config = get_config()

        test_config = ConfigData()
        test_config.database.url = "sqlite:///override.db"

        with with_context(test_config):
            config = get_config()
            assert config.database.url == "sqlite:///override.db"
            assert config.database.pool_size == original_config.database.pool_size
            assert config.app.port == original_config.app.port
            assert config.logging.level == original_config.logging.level

    def test_with_context_nested_overrides(self):
        original_config = get_config()

        level1_config = ConfigData()
        level1_config.app.environment = "production"
        level1_config.database.url = "sqlite:///level1.db"

        with with_context(level1_config):
            assert get_config().app.environment == "production"

            level2_config = ConfigData()
            level2_config.app.environment = "test"
            level2_config.logging.level = "DEBUG"

            with with_context(level2_config):
                level2 = get_config()
                assert level2.app.environment == "test"
                assert level2.logging.level == "DEBUG"
                # Inherited from level 1
                assert level2.database.url == "sqlite:///level1.db"

            back_to_level1 = get_config()
            assert back_to_level1.app.environment == "production"
            assert back_to_level1.logging.level == original_config.logging.level

        assert get_config() is original_config

    def test_with_context_no_override(self):
        original_config = get_config()

        with with_context():
            assert get_config() is original_config

        assert get_config() is original_config

    def test_rejects_non_config_override(self):
        with pytest.raises(ValueError, match="config_override must be ConfigData"):
            with with_context({"app": {"port": 1}}):
                pass

    def test_exception_handling_in_context(self):
        """Should restore the context even when the block raises."""
        original_config = get_config()

        test_config = ConfigData()
        test_config.app.port = 9999

        with pytest.raises(RuntimeError):
            with with_context(test_config):
                assert get_config().app.port == 9999
                raise RuntimeError("boom")

        assert get_config() is original_config

    def test_set_config_replaces_whole_config(self):
        original_context = get_context()
        replacement = ConfigData()
        replacement.app.port = 1234

        try:
            set_config(replacement)
            assert get_config() is replacement
        finally:
            set_context(original_context)

        assert get_config() is original_context.config


class TestAsyncContextManager:
    """Test context manager behavior in async contexts."""

    @pytest.mark.asyncio
    async def test_async_context_isolation(self):
        original_config = get_config()

        async def async_worker(worker_id: int) -> int:
            worker_config = ConfigData()
            worker_config.app.port = 9000 + worker_id

            with with_context(worker_config):
                await asyncio.sleep(0.01)
                return get_config().app.port

        results = await asyncio.gather(*(async_worker(i) for i in range(5)))

        assert results == [9000 + i for i in range(5)]
        assert get_config() is original_config
