"""
Page loader: renders a URL in headless Chromium and returns its HTML.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from f1gpt.errors import NetworkError

DEFAULT_TIMEOUT_SEC = 30.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Document:
    url: str
    raw_content: str


class DocumentLoader(Protocol):
    def fetch(self, url: str) -> Document:
        ...


class BrowserPageLoader(DocumentLoader):
    """
    Fetch pages with client-side rendering.

    Navigation waits for DOMContentLoaded only, so slow images and trackers do not
    hold up ingestion. Use as a context manager: one browser per run, one page per URL.
    """

    def __init__(self, timeout_sec: float = DEFAULT_TIMEOUT_SEC, headless: bool = True) -> None:
        self.timeout_ms = int(timeout_sec * 1000)
        self.headless = headless
        self._playwright = None
        self._browser = None

    def __enter__(self) -> "BrowserPageLoader":
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=self.headless)
        except Exception:
            self.close()
            raise
        logger.info("Headless browser started", extra={"timeout_ms": self.timeout_ms})
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    def fetch(self, url: str) -> Document:
        if self._browser is None:
            raise RuntimeError("BrowserPageLoader must be entered before fetching")

        page = self._browser.new_page()
        try:
            page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)
            html = page.content()
        except PlaywrightTimeoutError as exc:
            raise NetworkError(url, "Page load timed out", details={"timeout_ms": self.timeout_ms}) from exc
        except PlaywrightError as exc:
            raise NetworkError(url, f"Navigation failed ({exc.message})") from exc
        finally:
            page.close()

        logger.info("Fetched page", extra={"url": url, "chars": len(html)})
        return Document(url=url, raw_content=html)


__all__ = ["Document", "DocumentLoader", "BrowserPageLoader", "DEFAULT_TIMEOUT_SEC"]
