"""Schedule scraper for the PeopleSoft class schedule page."""

import logging
from typing import Optional

from bs4 import BeautifulSoup, Tag
from selenium import webdriver
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC
from selenium.common.exceptions import TimeoutException, NoSuchElementException
from selenium.webdriver.chrome.options import Options as ChromeOptions

from .errors import FormatError
from .models import Course, CourseField

logger = logging.getLogger(__name__)


COURSE_ROW_SELECTOR = (
    "div.ps_box-group > div.ps_box-scrollarea.psc_border-bottomonly"
    " > div.ps_box-scrollarea-row"
)

# The days prefix is also a prefix of the times span id
FIELD_SELECTORS = {
    CourseField.TITLE: "a[id^=DERIVED_SSR_FL_SSR_SCRTAB_DTLS]",
    CourseField.DATE_RANGE: "span[id^=DERIVED_SSR_FL_SSR_ST_END_DT]",
    CourseField.DAYS: (
        "span[id^=DERIVED_SSR_FL_SSR_DAYS]:not([id^=DERIVED_SSR_FL_SSR_DAYSTIMES])"
    ),
    CourseField.TIMES: "span[id^=DERIVED_SSR_FL_SSR_DAYSTIMES]",
    CourseField.ROOM: "span[id^=DERIVED_SSR_FL_SSR_DRV_ROOM]",
    CourseField.STATUS: "span[id^=DERIVED_SSR_FL_SSR_DRV_STAT]",
}


class HtmlCourseRecord:
    """Field reader over one course row of the schedule page."""

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def read(self, field: CourseField) -> str:
        """Return the raw text of a labelled field.

        Raises:
            FormatError: If the row has no element for the field.
        """
        element = self._tag.select_one(FIELD_SELECTORS[field])
        if element is None:
            raise FormatError(f"Course row has no {field.value} field")
        return element.get_text()


class ScheduleScraper:
    """Scraper for extracting enrolled courses from the class schedule page.

    The page is either fetched with Selenium (the schedule is rendered by
    JavaScript after sign-in) or loaded from a saved HTML file.
    """

    WAIT_TIMEOUT = 30

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        headless: bool = True
    ) -> None:
        """Initialize scraper.

        Args:
            username: Portal login username, or None to skip sign-in.
            password: Portal login password.
            headless: Run browser in headless mode (default: True).
        """
        self._username = username
        self._password = password
        self._headless = headless
        self._driver: Optional[webdriver.Chrome] = None
        self._soup: Optional[BeautifulSoup] = None
        self.skipped: list[tuple[int, str]] = []

    def _init_driver(self) -> webdriver.Chrome:
        """Initialize Chrome WebDriver with appropriate options."""
        options = ChromeOptions()
        if self._headless:
            options.add_argument("--headless=new")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument("--disable-gpu")
        options.add_argument("--window-size=1920,1080")
        options.add_argument("--lang=en-US")

        return webdriver.Chrome(options=options)

    def _login(self) -> None:
        """Submit the PeopleSoft sign-in form if it is shown."""
        if not self._driver or not self._username:
            return

        try:
            username_field = WebDriverWait(self._driver, self.WAIT_TIMEOUT).until(
                EC.presence_of_element_located((By.ID, "userid"))
            )
            username_field.clear()
            username_field.send_keys(self._username)

            password_field = self._driver.find_element(By.ID, "pwd")
            password_field.clear()
            password_field.send_keys(self._password or "")

            self._driver.find_element(By.NAME, "Submit").click()
        except TimeoutException:
            logger.info("No sign-in form found, assuming an existing session")
        except NoSuchElementException as e:
            logger.warning("Sign-in form incomplete: %s", e.msg)

    def _wait_for_schedule(self) -> None:
        if not self._driver:
            return

        try:
            WebDriverWait(self._driver, self.WAIT_TIMEOUT).until(
                EC.presence_of_element_located((By.CSS_SELECTOR, COURSE_ROW_SELECTOR))
            )
        except TimeoutException:
            logger.warning("Schedule rows did not appear within %ss", self.WAIT_TIMEOUT)

    def fetch_schedule(self, url: str) -> BeautifulSoup:
        """Fetch and parse the schedule page.

        Args:
            url: Full URL to the class schedule page.

        Returns:
            Parsed HTML as BeautifulSoup object.
        """
        self._driver = self._init_driver()

        try:
            self._driver.get(url)

            self._login()

            self._wait_for_schedule()

            return self.load_html(self._driver.page_source)

        finally:
            if self._driver:
                self._driver.quit()
                self._driver = None

    def load_html(self, html: str) -> BeautifulSoup:
        """Parse an already rendered schedule page."""
        self._soup = BeautifulSoup(html, "lxml")
        return self._soup

    def find_records(self) -> list[HtmlCourseRecord]:
        """Return a field reader per course row, in page order."""
        if not self._soup:
            raise RuntimeError("No schedule data loaded. Call fetch_schedule() first.")

        return [HtmlCourseRecord(row) for row in self._soup.select(COURSE_ROW_SELECTOR)]

    def parse_courses(self) -> list[Course]:
        """Extract a Course from every course row.

        Rows that cannot be read are logged and listed in ``skipped``
        as (row index, reason) pairs.

        Returns:
            List of Course objects.
        """
        courses: list[Course] = []
        self.skipped = []

        for index, record in enumerate(self.find_records()):
            try:
                courses.append(Course.from_reader(record))
            except FormatError as e:
                logger.warning("Skipping unreadable course row %d: %s", index, e)
                self.skipped.append((index, str(e)))

        logger.debug("Extracted %d courses", len(courses))
        return courses
