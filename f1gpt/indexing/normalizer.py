"""
HTML normalisation: drop site chrome, keep the main content, flatten to clean text.
"""

from __future__ import annotations

import re
from typing import List

from bs4 import BeautifulSoup

BOILERPLATE_SELECTORS: List[str] = [
    "nav",
    "header",
    "footer",
    "aside",
    "script",
    "style",
    "noscript",
    "iframe",
    "svg",
    "form",
    "[role=navigation]",
    "[role=banner]",
    "[role=contentinfo]",
    ".navbox",
    ".navigation",
    ".nav",
    ".menu",
    ".sidebar",
    ".breadcrumb",
    ".breadcrumbs",
    ".cookie-banner",
    ".advertisement",
    ".ad",
    "#toc",
    ".toc",
    ".mw-editsection",
    ".mw-jump-link",
    ".printfooter",
    "#catlinks",
]

# First non-empty match wins.
CONTENT_SELECTORS: List[str] = [
    "main",
    "article",
    "[role=main]",
    "#mw-content-text",
    ".mw-parser-output",
    "#content",
    ".main-content",
    ".content",
    ".post-content",
    ".entry-content",
]

# tag-shaped only; "a < b" in prose is kept
TAG_PATTERN = re.compile(r"</?[A-Za-z][^>]*>")
ARTIFACT_PATTERN = re.compile(r"\[\s*(?:edit|citation needed|\d+)\s*\]", flags=re.IGNORECASE)
WHITESPACE_PATTERN = re.compile(r"\s+")


def strip_boilerplate(soup: BeautifulSoup) -> BeautifulSoup:
    for selector in BOILERPLATE_SELECTORS:
        for element in soup.select(selector):
            # nested matches die with their ancestor
            if not element.decomposed:
                element.decompose()
    return soup


def select_main_text(soup: BeautifulSoup) -> str:
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = element.get_text(" ")
        if text.strip():
            return text

    root = soup.body or soup
    return root.get_text(" ")


def clean_text(text: str) -> str:
    text = TAG_PATTERN.sub(" ", text)
    text = ARTIFACT_PATTERN.sub(" ", text)
    text = WHITESPACE_PATTERN.sub(" ", text)
    return text.strip()


def normalize(raw_content: str) -> str:
    """Turn rendered HTML into single-spaced plain text of the page's main content."""
    soup = BeautifulSoup(raw_content, "html.parser")
    strip_boilerplate(soup)
    return clean_text(select_main_text(soup))


__all__ = ["normalize", "clean_text", "strip_boilerplate", "select_main_text", "BOILERPLATE_SELECTORS", "CONTENT_SELECTORS"]
