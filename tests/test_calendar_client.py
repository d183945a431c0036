"""Unit tests for CalendarClient."""
import pytest
import responses
from requests.exceptions import ConnectionError, Timeout

from scraper.calendar_client import CalendarClient, FetchError, NetworkError, ParseError

SERVER_URL = 'https://calendar.example.org'


class TestCalendarClient:
    """Test cases for CalendarClient class."""

    @responses.activate
    def test_fetch_school_calendar_success(self):
        """Test successful school calendar fetch."""
        responses.add(
            responses.GET,
            f"{SERVER_URL}/schoolCalendar",
            json=[
                {'eventName': 'Back to School Night', 'startDateTime': '2024-09-05T22:30:00.000Z'}
            ],
            status=200
        )

        client = CalendarClient(SERVER_URL + '/', timeout=30)
        events = client.fetch_school_calendar()

        assert len(events) == 1
        assert events[0]['eventName'] == 'Back to School Night'
        assert responses.calls[0].request.url == f"{SERVER_URL}/schoolCalendar"

    @responses.activate
    def test_fetch_athletics_calendar_success(self):
        responses.add(
            responses.GET,
            f"{SERVER_URL}/athleticsCalendar",
            json={
                'games': [{'team': 'JV Tennis', 'startDateTime': '2024-09-12T19:00:00.000Z'}],
                'practices': []
            },
            status=200
        )

        calendar = CalendarClient(SERVER_URL).fetch_athletics_calendar()

        assert len(calendar['games']) == 1
        assert calendar['practices'] == []

    @responses.activate
    def test_fetch_athletics_calendar_missing_lists(self):
        """Test missing or null category lists are treated as empty."""
        responses.add(
            responses.GET,
            f"{SERVER_URL}/athleticsCalendar",
            json={'games': None},
            status=200
        )

        calendar = CalendarClient(SERVER_URL).fetch_athletics_calendar()

        assert calendar == {'games': [], 'practices': []}

    @responses.activate
    def test_fetch_athletics_teams_success(self):
        responses.add(
            responses.GET,
            f"{SERVER_URL}/athleticsTeams",
            json={'Fall': ['Varsity Soccer']},
            status=200
        )

        assert CalendarClient(SERVER_URL).fetch_athletics_teams() == {'Fall': ['Varsity Soccer']}

    @responses.activate
    def test_http_error_raises_network_error(self):
        """Test non-2xx responses fail without retrying."""
        responses.add(
            responses.GET,
            f"{SERVER_URL}/schoolCalendar",
            status=503
        )

        with pytest.raises(NetworkError) as exc_info:
            CalendarClient(SERVER_URL).fetch_school_calendar()

        assert exc_info.value.url == f"{SERVER_URL}/schoolCalendar"
        assert len(responses.calls) == 1

    @responses.activate
    def test_connection_error_raises_network_error(self):
        responses.add(
            responses.GET,
            f"{SERVER_URL}/athleticsCalendar",
            body=ConnectionError('Connection refused')
        )

        with pytest.raises(NetworkError):
            CalendarClient(SERVER_URL).fetch_athletics_calendar()

    @responses.activate
    def test_timeout_raises_network_error(self):
        responses.add(
            responses.GET,
            f"{SERVER_URL}/athleticsCalendar",
            body=Timeout('Request timed out')
        )

        with pytest.raises(FetchError):
            CalendarClient(SERVER_URL).fetch_athletics_calendar()

        assert len(responses.calls) == 1

    @responses.activate
    def test_invalid_json_raises_parse_error(self):
        responses.add(
            responses.GET,
            f"{SERVER_URL}/schoolCalendar",
            body='<html>Service Unavailable</html>',
            status=200
        )

        with pytest.raises(ParseError):
            CalendarClient(SERVER_URL).fetch_school_calendar()

    @responses.activate
    def test_wrong_document_shape_raises_parse_error(self):
        responses.add(
            responses.GET,
            f"{SERVER_URL}/schoolCalendar",
            json={'events': []},
            status=200
        )
        responses.add(
            responses.GET,
            f"{SERVER_URL}/athleticsCalendar",
            json=[],
            status=200
        )
        responses.add(
            responses.GET,
            f"{SERVER_URL}/athleticsTeams",
            json=['Varsity Soccer'],
            status=200
        )

        client = CalendarClient(SERVER_URL)
        with pytest.raises(ParseError):
            client.fetch_school_calendar()
        with pytest.raises(ParseError):
            client.fetch_athletics_calendar()
        with pytest.raises(ParseError):
            client.fetch_athletics_teams()
