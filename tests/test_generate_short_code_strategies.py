"""
Tests for short code generation strategies.
"""
import pytest

from shorturl_app.services.short_code_strategies import (
    RandomShortCodeStrategy,
    ShortCodeGenerationError,
    URL_SAFE_ALPHABET,
)
from shorturl_app.dependencies import get_short_code_strategy


def never_taken(code: str) -> bool:
    return False


class TestRandomStrategy:
    """Test random generation strategy"""

    def test_generates_correct_length(self):
        """Test that random strategy generates codes of configured length"""
        strategy = RandomShortCodeStrategy(length=6)

        code = strategy.generate(never_taken)

        assert len(code) == 6

    def test_uses_url_safe_alphabet(self):
        """Test every character is URL safe"""
        strategy = RandomShortCodeStrategy(length=6)

        for _ in range(200):
            code = strategy.generate(never_taken)
            assert set(code) <= set(URL_SAFE_ALPHABET)

    def test_codes_vary(self):
        """Test that repeated calls don't return one fixed code"""
        strategy = RandomShortCodeStrategy(length=6)

        codes = {strategy.generate(never_taken) for _ in range(100)}

        assert len(codes) > 90

    def test_skips_taken_codes(self, monkeypatch):
        """Test a taken candidate is retried, not returned"""
        strategy = RandomShortCodeStrategy(length=6, max_retries=5)
        candidates = iter(["taken1", "taken2", "free01"])
        monkeypatch.setattr(strategy, "_generate_random_string", lambda: next(candidates))

        code = strategy.generate(lambda c: c.startswith("taken"))

        assert code == "free01"

    def test_gives_up_after_max_retries(self):
        """Test generation fails once every attempt collides"""
        strategy = RandomShortCodeStrategy(length=6, max_retries=3)
        attempts = []

        def always_taken(code):
            attempts.append(code)
            return True

        with pytest.raises(ShortCodeGenerationError):
            strategy.generate(always_taken)
        assert len(attempts) == 3


class TestShortCodeStrategyDependency:
    """Test the injected code generator"""

    def test_builds_random_strategy_from_settings(self):
        """Test length and retry budget come from settings"""
        get_short_code_strategy.cache_clear()
        try:
            strategy = get_short_code_strategy()
            assert isinstance(strategy, RandomShortCodeStrategy)
            assert strategy.length == 6
            assert strategy.max_retries == 5
        finally:
            get_short_code_strategy.cache_clear()

    def test_returns_cached_instance(self):
        first = get_short_code_strategy()
        second = get_short_code_strategy()
        assert first is second

    def test_service_uses_injected_strategy(self, client, monkeypatch):
        """Test the route generates codes with the injected strategy"""
        strategy = RandomShortCodeStrategy(length=6)
        monkeypatch.setattr(strategy, "_generate_random_string", lambda: "fixed1")
        client.app.dependency_overrides[get_short_code_strategy] = lambda: strategy

        response = client.post("/shorturls", json={"url": "https://example.com"})

        assert response.status_code == 201
        assert response.json()["shortLink"].endswith("/fixed1")
