# dbw_gateway.py
# Available subject to the Apache 2.0 License
# https://www.apache.org/licenses/LICENSE-2.0

# This file has all the shared logic for talking HTTP: building the headers for
# GitHub and for the private course API, and sending exactly one request per call.

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import iso8601
import requests

from dbw_config import VERSION
from dbw_errors import ApiError, TransportError

USER_AGENT = "dbw/" + VERSION


@dataclass(frozen=True)
class ApiRequest:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict, repr=False)
    body: Optional[Any] = None


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def dict_to_pretty_json(d: Any, sort_keys: bool = True) -> str:
    return json.dumps(d, sort_keys=sort_keys, indent=2)


def github_headers(github_token: str) -> dict:
    """
    Given a GitHub access token, produces a Python dict suitable for passing to requests' headers field.
    """
    return {
        "User-Agent": USER_AGENT,
        "Authorization": "Bearer " + github_token,
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }


def expire_headers(private_token: str) -> dict:
    return {
        "User-Agent": USER_AGENT,
        "X-API-Private-Token": private_token,
        "Content-Type": "application/json",
    }


def send(request: ApiRequest) -> ApiResponse:
    """
    Sends the request, once. Anything that keeps us from getting a response at all turns into a
    TransportError; an HTTP error status is still a response and is returned as such.
    """
    headers = dict(request.headers)
    data = None
    if request.body is not None:
        data = json.dumps(request.body).encode("utf-8")
        headers.setdefault("Content-Type", "application/json")

    try:
        result = requests.request(request.method, request.url, headers=headers, data=data)
    except requests.RequestException as e:
        # the message names the cause, but never the headers (they hold the token)
        raise TransportError("%s %s failed: %s" % (request.method, request.url, e)) from e

    return ApiResponse(status_code=result.status_code,
                       body=result.text,
                       headers=dict(result.headers))


def fail_on_github_errors(response: ApiResponse, request: ApiRequest):
    if not response.ok:
        raise ApiError(response.status_code, request.url, response.body)


# And now for a bit of code to handle times and timezones.

LOCAL_TIMEZONE = datetime.now(timezone.utc).astimezone().tzinfo


def localtime_from_iso_datestr(date_str: str) -> str:
    return str(iso8601.parse_date(date_str).astimezone(LOCAL_TIMEZONE))
