"""
Grab the GOLD "My Schedule" page through a real browser.

Workflow:
1. Open Chrome on GOLD → user signs in (UCSB NetID + Duo) by hand
2. User opens "My Schedule" for the quarter and presses Enter here
3. Page source is checked for course blocks and returned for parsing

No credentials pass through this module.
"""
from __future__ import annotations

import logging

from selenium import webdriver
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from selenium.common.exceptions import TimeoutException
from webdriver_manager.chrome import ChromeDriverManager

from .gold_html import SCHEDULE_CONTAINER_ID, looks_like_schedule

logger = logging.getLogger(__name__)

GOLD_URL = "https://my.sa.ucsb.edu/gold/"


def _create_driver() -> webdriver.Chrome:
    options = Options()
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--window-size=1200,900")
    try:
        service = Service(ChromeDriverManager().install())
        return webdriver.Chrome(service=service, options=options)
    except Exception as e:
        raise RuntimeError(
            f"Could not start Chrome. Install Chrome and run again.\nError: {e}"
        ) from e


def _wait_for_schedule(driver: webdriver.Chrome, timeout: int = 10) -> bool:
    try:
        WebDriverWait(driver, timeout).until(
            EC.presence_of_element_located((By.ID, SCHEDULE_CONTAINER_ID))
        )
        return True
    except TimeoutException:
        return False


def fetch_schedule_html(url: str = GOLD_URL, attempts: int = 2) -> str:
    """
    Open GOLD in Chrome and return the schedule page HTML once the user has
    navigated to it.

    :raises RuntimeError: if no schedule is detected after *attempts* tries.
    """
    driver = _create_driver()
    try:
        print("Opening GOLD in Chrome…")
        driver.get(url)
        print()
        print("In the browser:")
        print("  1. Sign in to GOLD")
        print("  2. Open My Schedule and pick the quarter")
        print("  3. Wait until the course list is shown")
        print()

        for attempt in range(1, attempts + 1):
            input("Press Enter when the schedule is on screen → ")
            _wait_for_schedule(driver)
            html = driver.page_source
            if looks_like_schedule(html):
                logger.info("Schedule detected (%d chars)", len(html))
                return html
            print("No schedule detected on the current page.")
            logger.warning("Attempt %d: no course blocks in page", attempt)

        raise RuntimeError(
            "Could not detect the My Schedule page. Open GOLD's My Schedule "
            "view (not the registration cart) and try again."
        )
    finally:
        driver.quit()
