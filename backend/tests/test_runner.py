"""
Tests for the command-line runner.
"""

import logging

import pytest

from runner.config import Settings
from runner.main import ColorStripFormatter, parse_args, build_settings, main
import runner.main as runner_main


class TestParseArgs:
    """Test command-line parsing and settings overrides."""

    def test_defaults(self):
        args = parse_args([])
        assert args.sample is False
        assert args.regions is None

    def test_regions(self):
        args = parse_args(['--regions', '1', '13', '27'])
        assert args.regions == [1, 13, 27]

    def test_build_settings_overrides(self):
        args = parse_args(['--sample', '--debug', '--no-export', '--headed', '--output-dir', 'out'])
        settings = build_settings(args, Settings())

        assert settings.sample_mode is True
        assert settings.debug is True
        assert settings.export_enabled is False
        assert settings.headless is False
        assert settings.output_dir == 'out'
        assert settings.page_limit == 3

    def test_build_settings_keeps_base(self):
        base = Settings(max_pages=7)
        settings = build_settings(parse_args([]), base)

        assert settings.max_pages == 7
        assert settings.sample_mode is False


class TestColorStripFormatter:

    def test_strips_ansi_codes(self):
        formatter = ColorStripFormatter('%(message)s')
        record = logging.LogRecord('fitmap', logging.INFO, __file__, 1, '\033[92m12\033[0m gyms', None, None)
        assert formatter.format(record) == '12 gyms'


class TestMain:

    @pytest.mark.asyncio
    async def test_startup_failure_exit_code(self, fake_browser, monkeypatch):
        fake_browser.chromium.executable_path = '/nonexistent/chromium'
        monkeypatch.setattr(runner_main, 'setup_logging', lambda settings: None)

        exit_code = await main(['--regions', '1', '--no-export'])

        assert exit_code == 1

    @pytest.mark.asyncio
    async def test_invalid_region_exit_code(self, monkeypatch):
        monkeypatch.setattr(runner_main, 'setup_logging', lambda settings: None)

        assert await main(['--regions', '99']) == 1
