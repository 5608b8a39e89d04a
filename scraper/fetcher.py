"""Retrieval of monthly schedule pages."""

import logging
from typing import Callable, Optional
from urllib.parse import quote, urlsplit, urlunsplit

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from .errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://brionac.s17.xrea.com/schedule/homepage/homepage/calendar"


def page_url(base_url: str, year: int, month: int) -> str:
    """Public URL of the schedule page for a month."""
    return f"{base_url.rstrip('/')}/{year}/{year}{month:02d}.html"


def with_credentials(url: str, username: str, password: str) -> str:
    """Embed HTTP basic credentials into the authority part of ``url``."""
    if not username:
        return url
    parts = urlsplit(url)
    host = parts.netloc.rsplit("@", 1)[-1]
    userinfo = quote(username, safe="")
    if password:
        userinfo = f"{userinfo}:{quote(password, safe='')}"
    return urlunsplit(parts._replace(netloc=f"{userinfo}@{host}"))


class PageFetcher:
    """Fetcher loading schedule pages in a headless Chrome browser.

    The pages sit behind HTTP basic authentication and are served in
    EUC-JP; the browser takes care of both, and the decoded page source is
    returned. A fresh browser is started for every page so that several
    months can be fetched from different threads.
    """

    WAIT_TIMEOUT = 15

    def __init__(
        self,
        username: str,
        password: str,
        base_url: str = DEFAULT_BASE_URL,
        headless: bool = True,
        driver_factory: Optional[Callable[[], webdriver.Chrome]] = None,
    ) -> None:
        """Initialize fetcher with authentication credentials.

        Args:
            username: Basic auth username.
            password: Basic auth password.
            base_url: URL of the calendar directory on the site.
            headless: Run browser in headless mode (default: True).
            driver_factory: Callable creating the WebDriver, used by tests.
        """
        self._username = username
        self._password = password
        self._headless = headless
        self.base_url = base_url
        self._driver_factory = driver_factory or self._init_driver

    def _init_driver(self) -> webdriver.Chrome:
        """Initialize Chrome WebDriver with appropriate options."""
        options = ChromeOptions()
        if self._headless:
            options.add_argument("--headless=new")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument("--disable-gpu")
        options.add_argument("--lang=ja-JP")

        return webdriver.Chrome(options=options)

    def url_for(self, year: int, month: int) -> str:
        return page_url(self.base_url, year, month)

    def fetch(self, year: int, month: int) -> str:
        """Fetch the schedule page for a month.

        Args:
            year: Calendar year.
            month: Month number, 1-12.

        Returns:
            Decoded page source.

        Raises:
            FetchError: If the browser could not load the page.
        """
        url = self.url_for(year, month)
        logger.debug("Fetching calendar page %s", url)

        try:
            driver = self._driver_factory()
        except WebDriverException as exc:
            raise FetchError(f"Could not start browser for {url}: {exc.msg or exc}") from exc

        try:
            driver.get(with_credentials(url, self._username, self._password))
            try:
                WebDriverWait(driver, self.WAIT_TIMEOUT).until(
                    EC.presence_of_element_located((By.TAG_NAME, "table"))
                )
            except TimeoutException:
                logger.debug("No table appeared on %s", url)
            return driver.page_source
        except WebDriverException as exc:
            raise FetchError(f"Failed to fetch {url}: {exc.msg or exc}") from exc
        finally:
            driver.quit()
