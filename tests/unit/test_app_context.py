"""
Unit tests for AppContext wiring and Settings.

Tests cover:
- Price fetcher selection from settings
- One shared price cache across services
- Settings carried into the cache and refresher
- Settings validation
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from stocktracker.app_context import AppContext
from stocktracker.config.settings import Settings
from stocktracker.providers import StubPriceFetcher, YahooPriceFetcher

from tests.conftest import InMemoryHoldingsRepository, make_holding


class TestFetcherSelection:
    def test_stub_provider(self, holdings_repo):
        context = AppContext(settings=Settings(price_provider="stub"), holdings_repo=holdings_repo)

        assert isinstance(context.fetcher, StubPriceFetcher)

    def test_yahoo_provider_with_suffix(self, holdings_repo):
        settings = Settings(price_provider="yahoo", price_symbol_suffix=".ax")
        context = AppContext(settings=settings, holdings_repo=holdings_repo)

        fetcher = context.fetcher
        assert isinstance(fetcher, YahooPriceFetcher)
        assert fetcher.upstream_symbol("BHP") == "BHP.AX"

    def test_injected_fetcher_wins(self, deterministic_fetcher, holdings_repo):
        context = AppContext(
            settings=Settings(price_provider="yahoo"),
            fetcher=deterministic_fetcher,
            holdings_repo=holdings_repo,
        )

        assert context.fetcher is deterministic_fetcher


class TestWiring:
    def test_single_shared_cache(self, deterministic_fetcher, holdings_repo, clock):
        context = AppContext(
            settings=Settings(price_cache_ttl_seconds=60),
            fetcher=deterministic_fetcher,
            holdings_repo=holdings_repo,
            clock=clock,
        )

        assert context.price_cache is context.price_cache
        assert context.price_cache.ttl.total_seconds() == 60
        assert context.portfolio is context.portfolio

    @pytest.mark.asyncio
    async def test_service_and_refresher_share_cache(self, deterministic_fetcher, holdings_factory_repo):
        context = AppContext(
            settings=Settings(price_refresh_enabled=False),
            fetcher=deterministic_fetcher,
            holdings_repo=holdings_factory_repo,
        )

        await context.refresher.run_once()
        calls = len(deterministic_fetcher.calls)
        await context.portfolio.get_summary("alice")

        assert len(deterministic_fetcher.calls) == calls

    @pytest.mark.asyncio
    async def test_disabled_refresher_not_started(self, deterministic_fetcher, holdings_repo):
        context = AppContext(
            settings=Settings(price_refresh_enabled=False),
            fetcher=deterministic_fetcher,
            holdings_repo=holdings_repo,
        )

        context.start_background()

        assert not context.refresher.is_running
        await context.close()

    @pytest.mark.asyncio
    async def test_close_stops_refresher(self, deterministic_fetcher, holdings_repo):
        context = AppContext(
            settings=Settings(price_refresh_initial_delay_seconds=3600),
            fetcher=deterministic_fetcher,
            holdings_repo=holdings_repo,
        )

        context.start_background()
        assert context.refresher.is_running
        await context.close()

        assert not context.refresher.is_running


@pytest.fixture
def holdings_factory_repo() -> InMemoryHoldingsRepository:
    return InMemoryHoldingsRepository(
        {"alice": [make_holding(ticker="BHP", holding_id=1), make_holding(ticker="CSL", holding_id=2)]}
    )


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.price_cache_ttl_seconds == 900
        assert settings.price_refresh_interval_seconds == 900.0

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("STOCKTRACKER_PRICE_PROVIDER", "STUB")
        monkeypatch.setenv("STOCKTRACKER_PRICE_CACHE_TTL_SECONDS", "60")

        settings = Settings()

        assert settings.price_provider == "stub"
        assert settings.price_cache_ttl_seconds == 60

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize(
        "field, value",
        [("log_level", "LOUD"), ("price_provider", "bloomberg")],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(PydanticValidationError):
            Settings(**{field: value})
