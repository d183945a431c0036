"""HTTP client for the school calendar server."""
import logging
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a calendar feed cannot be retrieved."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class NetworkError(FetchError):
    """Transport failure or non-success HTTP status."""


class ParseError(FetchError):
    """Response body is not the JSON document we expect."""


class CalendarClient:
    """Client for the calendar server's JSON endpoints."""

    SCHOOL_CALENDAR_PATH = '/schoolCalendar'
    ATHLETICS_CALENDAR_PATH = '/athleticsCalendar'
    ATHLETICS_TEAMS_PATH = '/athleticsTeams'

    def __init__(self, server_url: str, timeout: int = 30):
        """
        Initialize the calendar client.

        Args:
            server_url: Base URL of the calendar server
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.server_url = server_url.rstrip('/')
        self.timeout = timeout

    def fetch(self, path: str) -> Any:
        """
        GET a path on the calendar server and decode the JSON body.

        There is no retry; the next scheduled run retries.

        Args:
            path: Endpoint path, e.g. '/schoolCalendar'

        Returns:
            Decoded JSON document

        Raises:
            NetworkError: On transport failure or non-2xx status
            ParseError: If the body is not valid JSON
        """
        url = f"{self.server_url}{path}"
        logger.info(f"Fetching {url}")

        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            raise NetworkError(f"Request to {url} failed: {e}", url) from e

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise ParseError(f"Invalid JSON from {url}: {e}", url) from e

    def fetch_school_calendar(self) -> List[Dict[str, Any]]:
        """
        Fetch the school calendar.

        Returns:
            List of raw calendar event dicts
        """
        data = self.fetch(self.SCHOOL_CALENDAR_PATH)
        if not isinstance(data, list):
            raise ParseError(
                f"Expected a list from {self.SCHOOL_CALENDAR_PATH}, "
                f"got {type(data).__name__}",
                f"{self.server_url}{self.SCHOOL_CALENDAR_PATH}"
            )
        logger.info(f"Fetched {len(data)} school calendar events")
        return data

    def fetch_athletics_calendar(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Fetch the athletics calendar.

        Returns:
            Dict with 'games' and 'practices' lists (missing lists are empty)
        """
        url = f"{self.server_url}{self.ATHLETICS_CALENDAR_PATH}"
        data = self.fetch(self.ATHLETICS_CALENDAR_PATH)
        if not isinstance(data, dict):
            raise ParseError(
                f"Expected an object from {self.ATHLETICS_CALENDAR_PATH}, "
                f"got {type(data).__name__}",
                url
            )

        calendar = {}
        for key in ('games', 'practices'):
            records = data.get(key) or []
            if not isinstance(records, list):
                raise ParseError(f"Expected '{key}' to be a list", url)
            calendar[key] = records

        logger.info(
            f"Fetched {len(calendar['games'])} games and "
            f"{len(calendar['practices'])} practices"
        )
        return calendar

    def fetch_athletics_teams(self) -> Dict[str, List[str]]:
        """
        Fetch athletics teams grouped by season.

        Returns:
            Mapping of season name to list of team names
        """
        data = self.fetch(self.ATHLETICS_TEAMS_PATH)
        if not isinstance(data, dict):
            raise ParseError(
                f"Expected an object from {self.ATHLETICS_TEAMS_PATH}, "
                f"got {type(data).__name__}",
                f"{self.server_url}{self.ATHLETICS_TEAMS_PATH}"
            )
        return data
