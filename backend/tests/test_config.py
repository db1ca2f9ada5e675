"""
Tests for runtime settings and site configuration.
"""

import pytest


class TestSettings:
    """Test the Settings configuration class."""

    def test_settings_defaults(self):
        """Test that settings have the documented defaults."""
        from runner.config import Settings

        settings = Settings()
        assert settings.headless is True
        assert settings.navigation_timeout_ms == 30000
        assert settings.retry_max_attempts == 2
        assert settings.retry_backoff_seconds == 3.0
        assert settings.session_recycle_threshold == 5
        assert settings.max_pages == 60
        assert settings.empty_page_tolerance == 1
        assert settings.sample_mode is False
        assert settings.log_level == "INFO"

    def test_page_limit_follows_mode(self):
        """Test that sample mode caps pages per region at 3."""
        from runner.config import Settings

        assert Settings().page_limit == 60
        assert Settings(sample_mode=True).page_limit == 3

    def test_listing_limit_follows_mode(self):
        """Test that only sample mode limits detail fetches."""
        from runner.config import Settings

        assert Settings().listing_limit is None
        assert Settings(sample_mode=True).listing_limit == 5

    def test_settings_log_paths(self):
        """Test that log paths are valid."""
        from runner.config import settings

        assert settings.log_dir.name == "logs"
        assert settings.log_file.name == "scraper.log"

    def test_invalid_limits_rejected(self):
        """Test that non-positive limits fail validation."""
        from pydantic import ValidationError
        from runner.config import Settings

        with pytest.raises(ValidationError):
            Settings(session_recycle_threshold=0)
        with pytest.raises(ValidationError):
            Settings(retry_max_attempts=0)

    def test_settings_from_environment(self, monkeypatch):
        """Test that environment variables override defaults."""
        from runner.config import Settings

        monkeypatch.setenv("MAX_PAGES", "10")
        monkeypatch.setenv("HEADLESS", "false")

        settings = Settings()
        assert settings.max_pages == 10
        assert settings.headless is False


class TestSiteConfig:
    """Test region tables and URL building."""

    def test_all_regions_named(self):
        """Test that every area id 1-47 has a prefecture."""
        from fitmap.config import REGION_IDS, REGION_NAMES, PREFECTURES

        assert list(REGION_IDS) == list(range(1, 48))
        assert set(REGION_NAMES) == set(REGION_IDS)
        assert sorted(REGION_NAMES.values()) == sorted(PREFECTURES)

    def test_region_names_follow_site_numbering(self):
        """Test a few known area ids."""
        from fitmap.config import get_region_name

        assert get_region_name(1) == '東京都'
        assert get_region_name(12) == '大阪府'
        assert get_region_name(18) == '北海道'
        assert get_region_name(47) == '沖縄県'
        assert get_region_name(99) == ''

    def test_region_url(self):
        """Test that page 1 has no query string."""
        from fitmap.config import FITMAP

        assert FITMAP.region_url(13) == 'https://fitmap.jp/area/13/'
        assert FITMAP.region_url(13, 2) == 'https://fitmap.jp/area/13/?page=2'

    def test_absolute_url(self):
        """Test resolving relative listing links."""
        from fitmap.config import FITMAP

        assert FITMAP.absolute_url('/gym/123/') == 'https://fitmap.jp/gym/123/'
        assert FITMAP.absolute_url('https://other.example/gym/1/') == 'https://other.example/gym/1/'

    def test_list_regions(self):
        """Test crawl order is ascending."""
        from fitmap.config import list_regions

        regions = list_regions()
        assert regions[0] == 1
        assert regions[-1] == 47
        assert regions == sorted(regions)
