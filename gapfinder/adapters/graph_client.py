"""
Microsoft Graph API client for fetching calendar events.
"""

import logging
import re
from typing import Any, Dict, List

import pendulum
import requests
from pendulum import DateTime

from ..domain.exceptions import CalendarAPIError
from ..domain.models import BusyPeriod

logger = logging.getLogger(__name__)

# Graph returns 7 fractional digits, more than a datetime can hold
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


class GraphClient:
    """
    Client for Microsoft Graph API calendar operations.

    Uses the /me/calendar/calendarView endpoint, which expands recurring
    events into individual occurrences for the requested window.
    """

    GRAPH_API_ENDPOINT = "https://graph.microsoft.com/v1.0"
    PAGE_SIZE = 100

    def __init__(self, access_token: str, timeout: int = 30):
        """
        Initialize the Graph API client.

        Args:
            access_token: Valid Microsoft Graph access token
            timeout: Per-request timeout in seconds
        """
        self.access_token = access_token
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json"
        }

    def fetch_busy_periods(
        self,
        range_start: DateTime,
        range_end: DateTime,
        timezone: str = "Europe/Berlin"
    ) -> List[BusyPeriod]:
        """
        Get all busy events between two instants.

        Args:
            range_start: Start of the time window
            range_end: End of the time window
            timezone: IANA timezone the returned periods are expressed in

        Returns:
            List of BusyPeriod objects, in no particular order

        Raises:
            CalendarAPIError: If any page cannot be fetched or an event cannot be parsed
        """
        url = f"{self.GRAPH_API_ENDPOINT}/me/calendar/calendarView"
        params: Dict[str, Any] | None = {
            "startDateTime": range_start.to_iso8601_string(),
            "endDateTime": range_end.to_iso8601_string(),
            "$select": "subject,start,end,isCancelled,showAs",
            "$orderby": "start/dateTime",
            "$top": self.PAGE_SIZE,
        }
        headers = {**self.headers, "Prefer": f'outlook.timezone="{timezone}"'}

        events: List[Dict[str, Any]] = []

        while url:
            data = self._get(url, headers=headers, params=params)
            events.extend(data.get("value", []))

            # nextLink already carries the query string
            url = data.get("@odata.nextLink")
            params = None
            if url:
                logger.debug("Following calendarView page link (%d events so far)", len(events))

        logger.debug("Fetched %d events from Microsoft Graph", len(events))
        return self._parse_events(events, timezone)

    def _get(self, url: str, headers: Dict[str, str], params: Dict[str, Any] | None) -> Dict[str, Any]:
        try:
            response = requests.get(url, headers=headers, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as exc:
            raise CalendarAPIError(f"Failed to fetch calendar events from Microsoft Graph: {exc}") from exc
        except ValueError as exc:
            raise CalendarAPIError(f"Microsoft Graph returned invalid JSON: {exc}") from exc

    def _parse_events(self, events: List[Dict[str, Any]], timezone: str) -> List[BusyPeriod]:
        """
        Convert calendarView items into busy periods.

        Item format:
        {
            "subject": "Standup",
            "isCancelled": false,
            "showAs": "busy",
            "start": {"dateTime": "2024-03-18T09:30:00.0000000", "timeZone": "Europe/Berlin"},
            "end": {"dateTime": "2024-03-18T10:00:00.0000000", "timeZone": "Europe/Berlin"}
        }
        """
        busy_periods: List[BusyPeriod] = []

        for event in events:
            if event.get("isCancelled"):
                continue
            if str(event.get("showAs", "busy")).lower() == "free":
                continue

            try:
                start = self._parse_datetime(event["start"], timezone)
                end = self._parse_datetime(event["end"], timezone)
                busy_periods.append(
                    BusyPeriod(start=start, end=end, subject=event.get("subject") or "No Subject")
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise CalendarAPIError(
                    f"Could not parse calendar event {event.get('subject')!r}: {exc}"
                ) from exc

        return busy_periods

    def _parse_datetime(self, value: Dict[str, str], timezone: str) -> DateTime:
        """
        Parse a Graph dateTimeTimeZone object into the target timezone.
        """
        source_tz = value.get("timeZone") or "UTC"
        dt = pendulum.parse(_EXCESS_FRACTION.sub(r"\1", value["dateTime"]), tz=source_tz)

        if isinstance(dt, DateTime):
            return dt.in_timezone(timezone)

        raise ValueError(f"Could not parse datetime: {value['dateTime']}")

    def test_connection(self) -> Dict[str, Any]:
        """
        Test the connection and authentication by fetching user profile.

        Raises:
            CalendarAPIError: If connection test fails
        """
        return self._get(f"{self.GRAPH_API_ENDPOINT}/me", headers=self.headers, params=None)
