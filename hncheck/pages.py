"""Page objects for the Hacker News pages exercised by the browser checks."""
from __future__ import annotations

import logging
import re
from datetime import datetime

from playwright.sync_api import Locator, Page, expect

from .timestamps import MissingTimestampError, parse_age_title

logger = logging.getLogger(__name__)

AGE_SELECTOR = "span.age"
MORE_LINK_SELECTOR = "a.morelink"
# The login page also carries a "create account" form with the same field names.
LOGIN_FORM_SELECTOR = 'form:has(input[type="submit"][value="login"])'


class ListingExhaustedError(RuntimeError):
    """Raised when the listing has no further page before the target is reached."""


class SitePage:
    def __init__(self, page: Page, base_url: str):
        self.page = page
        self.base_url = base_url.rstrip("/")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def goto(self, path: str = "news") -> None:
        self.page.goto(self.url_for(path))


class SiteHeader(SitePage):
    """Top bar: anonymous login link, or the account display once signed in."""

    @property
    def login_link(self) -> Locator:
        return self.page.locator('span.pagetop a[href^="login"]')

    @property
    def account_bar(self) -> Locator:
        return self.page.locator("span.pagetop:has(#me)")

    @property
    def me_link(self) -> Locator:
        return self.page.locator("#me")

    @property
    def karma_label(self) -> Locator:
        return self.page.locator("#karma")

    @property
    def logout_link(self) -> Locator:
        return self.page.locator("#logout")

    def login(self, username: str, password: str) -> None:
        self.login_link.click()
        form = self.page.locator(LOGIN_FORM_SELECTOR)
        form.locator('input[name="acct"]').fill(username)
        form.locator('input[name="pw"]').fill(password)
        form.locator('input[type="submit"]').click()

    def logout(self) -> None:
        self.logout_link.click()

    def karma(self) -> int:
        return int(self.karma_label.inner_text().strip())

    def expect_logged_in(self, username: str) -> None:
        expect(self.account_bar).to_be_visible()
        expect(self.me_link).to_have_text(username)
        expect(self.karma_label).to_have_text(re.compile(r"^\s*\d+\s*$"))
        expect(self.account_bar).to_contain_text(re.compile(rf"{re.escape(username)}\s*\(\d+\)"))
        expect(self.logout_link).to_be_visible()

    def expect_logged_out(self) -> None:
        expect(self.login_link).to_be_visible()
        expect(self.me_link).to_have_count(0)
        expect(self.logout_link).to_have_count(0)


class NewestPage(SitePage):
    """The newest-first story listing with its "More" pagination link."""

    def goto(self, path: str = "newest") -> None:
        super().goto(path)

    @property
    def more_link(self) -> Locator:
        return self.page.locator(MORE_LINK_SELECTOR)

    def age_titles(self, limit: int | None = None) -> list[str]:
        """Return age titles in page order, reading at most ``limit`` spans."""
        spans = self.page.locator(AGE_SELECTOR)
        count = spans.count()
        if limit is not None:
            count = min(count, limit)
        titles: list[str] = []
        for index in range(count):
            title = spans.nth(index).get_attribute("title")
            if not title:
                raise MissingTimestampError(f"title attribute not found on age span #{index + 1} of {self.page.url}")
            titles.append(title)
        return titles

    def load_more(self) -> None:
        if self.more_link.count() == 0:
            raise ListingExhaustedError(f"No '{MORE_LINK_SELECTOR}' on {self.page.url}")
        self.more_link.click()
        self.page.wait_for_load_state("networkidle")

    def collect_timestamps(self, target: int) -> list[datetime]:
        """Read timestamps page by page until exactly ``target`` have been collected."""
        if target <= 0:
            raise ValueError("target must be greater than zero")

        timestamps: list[datetime] = []
        while len(timestamps) < target:
            titles = self.age_titles(limit=target - len(timestamps))
            timestamps.extend(parse_age_title(title) for title in titles)
            logger.debug("Read %d age titles from %s (%d/%d)", len(titles), self.page.url, len(timestamps), target)

            if len(timestamps) < target:
                self.load_more()
        return timestamps
