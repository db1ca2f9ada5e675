"""
Shared Playwright session pool.

One Chromium browser and one BrowserContext are shared by every crawler
in a run; each crawler owns its own Page on that context. The context is
created lazily on first use and torn down explicitly by the owner.

Memory is kept down by:
- blocking images, stylesheets and fonts at the routing layer
- letting crawlers recycle their pages (see DetailFetcher)
- closing the whole context between the area and detail phases
"""

import asyncio
import os
from typing import Optional, Dict
from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Route
import logging

from runner.config import Settings, settings as default_settings
from ..config import (
    USER_AGENT,
    ACCEPT_LANGUAGE,
    VIEWPORT,
    BROWSER_ARGS,
    BLOCKED_RESOURCE_TYPES,
)
from .retry import RetryPolicy

logger = logging.getLogger(__name__)


class BrowserStartupError(Exception):
    """Raised when Chromium cannot be launched at all."""


class SessionPool:
    """
    Owner of the shared browser context.

    Usage:
        async with SessionPool(settings) as pool:
            page = await pool.new_page()
            ...
            await pool.close_page(page)
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the pool. Nothing is launched until first use.

        Args:
            settings: Runtime settings (headless mode, cleanup timeout)
        """
        self.settings = settings or default_settings
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self.contexts_created = 0
        self.contexts_closed = 0

    @property
    def is_open(self) -> bool:
        return self._context is not None

    async def _block_heavy_resources(self, route: Route):
        """Abort non-essential subresources, continue everything else."""
        if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    async def _launch_browser(self):
        """Start Playwright and launch Chromium."""
        logger.info("Launching browser...")
        self._playwright = await async_playwright().start()

        try:
            # Verify Chromium is installed
            chromium_path = self._playwright.chromium.executable_path
            if not chromium_path or not os.path.exists(chromium_path):
                raise BrowserStartupError("Chromium browser not found. Run: playwright install chromium")

            self._browser = await self._playwright.chromium.launch(
                headless=self.settings.headless,
                args=BROWSER_ARGS,
                handle_sigint=False,
                handle_sigterm=False,
                handle_sighup=False,
            )
        except Exception as e:
            logger.error(f"Failed to launch browser: {e}")
            await self.close_context()
            if isinstance(e, BrowserStartupError):
                raise
            raise BrowserStartupError(f"Chromium failed to launch: {e}") from e

        logger.info("Browser launched")

    async def acquire_context(self) -> BrowserContext:
        """
        Get the shared context, creating browser and context on first call.

        Returns:
            The same BrowserContext until close_context() is called
        """
        if self._context is not None:
            return self._context

        if self._browser is None:
            await self._launch_browser()

        self._context = await self._browser.new_context(
            viewport=VIEWPORT,
            user_agent=USER_AGENT,
            ignore_https_errors=True,
            bypass_csp=True,
        )
        await self._context.route('**/*', self._block_heavy_resources)
        self.contexts_created += 1
        logger.debug(f"Browser context created (#{self.contexts_created})")
        return self._context

    async def _open_page(self) -> Page:
        context = await self.acquire_context()
        page = await context.new_page()
        await page.set_extra_http_headers({'Accept-Language': ACCEPT_LANGUAGE})
        return page

    async def _restart(self, error: Exception):
        logger.error(f"Page creation failed, restarting browser: {error}")
        await self.close_context()

    async def new_page(self) -> Page:
        """
        Open a fresh page on the shared context.

        If page creation fails the whole browser is restarted once.
        """
        policy = RetryPolicy(max_attempts=2)
        return await policy.run(self._open_page, on_retry=self._restart, description='new page')

    async def close_page(self, page: Optional[Page]):
        """Close a page, logging instead of raising on failure."""
        if page is None:
            return
        try:
            await asyncio.wait_for(page.close(), timeout=self.settings.cleanup_timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("Page close timed out")
        except Exception as e:
            logger.warning(f"Error closing page: {e}")

    async def close_context(self):
        """
        Tear down context, browser and driver.

        Safe to call repeatedly and when nothing was created. Every page
        opened from the context is invalid afterwards.
        """
        cleanup_timeout = self.settings.cleanup_timeout_seconds

        if self._context:
            logger.info("Closing browser context...")
            try:
                await asyncio.wait_for(self._context.close(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning("Context close timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error closing context: {e}")
            self._context = None
            self.contexts_closed += 1

        if self._browser:
            try:
                await asyncio.wait_for(self._browser.close(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning("Browser close timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None
            logger.info("Browser closed")

        if self._playwright:
            try:
                await asyncio.wait_for(self._playwright.stop(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning("Playwright stop timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error stopping playwright: {e}")
            self._playwright = None

    def stats(self) -> Dict[str, int]:
        """Count live pages and contexts; never raises."""
        try:
            if self._browser is None:
                return {'pages': 0, 'contexts': 0}
            contexts = self._browser.contexts
            return {
                'pages': sum(len(context.pages) for context in contexts),
                'contexts': len(contexts),
            }
        except Exception as e:
            logger.debug(f"Could not read resource stats: {e}")
            return {'pages': 0, 'contexts': 0}

    async def __aenter__(self):
        """Async context manager entry."""
        await self.acquire_context()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close_context()
