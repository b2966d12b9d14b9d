#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, sync_playwright

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from hncheck.pages import ListingExhaustedError, NewestPage  # noqa: E402
from hncheck.settings import get_settings, load_settings  # noqa: E402
from hncheck.timestamps import MissingTimestampError, OrderViolation, find_ordering_violations  # noqa: E402


def run_check(page: Page, base_url: str, target: int) -> list[OrderViolation]:
    newest = NewestPage(page, base_url)
    newest.goto()
    timestamps = newest.collect_timestamps(target)
    print(f"Collected {len(timestamps)} timestamps from {base_url}")
    print(f"Newest: {timestamps[0].isoformat()}  Oldest: {timestamps[-1].isoformat()}")
    return find_ordering_violations(timestamps)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check that the newest listing is sorted newest to oldest")
    parser.add_argument("--base-url", help="Site root (defaults to settings.yml / HNCHECK_BASE_URL)")
    parser.add_argument("--target", type=int, help="Number of items to collect (defaults to settings.yml)")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--config", type=Path, help="Settings file (defaults to config/settings.yml)")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config) if args.config else get_settings()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    base_url = (args.base_url or settings.base_url).rstrip("/")
    target = args.target if args.target is not None else settings.target_count
    if target <= 0:
        print("Error: --target must be greater than zero.", file=sys.stderr)
        return 1

    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=not args.headed)
        try:
            page = browser.new_page()
            page.set_default_timeout(settings.timeout_ms)
            violations = run_check(page, base_url, target)
        except (MissingTimestampError, ListingExhaustedError, ValueError, PlaywrightError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        finally:
            browser.close()

    if violations:
        for violation in violations:
            print(violation.describe(), file=sys.stderr)
        print(f"Ordering violations: {len(violations)}")
        return 1
    print("Listing is sorted newest to oldest.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
