# dbw_projector.py
# Available subject to the Apache 2.0 License
# https://www.apache.org/licenses/LICENSE-2.0

# Turns API responses into what the operator gets to see. Without --verbose each
# command shows a narrow view of the response; with --verbose the whole thing.

import json
from dataclasses import dataclass
from typing import Any, Callable, List

from dbw_errors import ProjectionError
from dbw_gateway import ApiResponse, dict_to_pretty_json


@dataclass(frozen=True)
class ProjectionSpec:
    name: str
    narrow: Callable[[Any, ApiResponse], str]


def _text(value: Any) -> str:
    # same as jq's string interpolation: missing values show up as null
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _members_lines(payload: Any, response: ApiResponse) -> str:
    if not isinstance(payload, list):
        raise ProjectionError("Expected a JSON array of members", response.status_code, response.body)

    lines = []
    for member in payload:
        if not isinstance(member, dict):
            raise ProjectionError("Expected each member to be a JSON object", response.status_code, response.body)
        lines.append("%s %s" % (_text(member.get("login")), _text(member.get("html_url"))))
    return "\n".join(lines)


def _require_object(payload: Any, response: ApiResponse) -> dict:
    if not isinstance(payload, dict):
        raise ProjectionError("Expected a JSON object", response.status_code, response.body)
    return payload


def select_fields(payload: dict, fields: List[str]) -> dict:
    """Keeps only the given fields, in the given order. Fields that aren't there are left out."""
    return {name: payload[name] for name in fields if name in payload}


def _membership(payload: Any, response: ApiResponse) -> str:
    return dict_to_pretty_json(select_fields(_require_object(payload, response), ["url", "state", "role"]),
                               sort_keys=False)


def _pages(payload: Any, response: ApiResponse) -> str:
    payload = _require_object(payload, response)
    return dict_to_pretty_json({"html_url": payload.get("html_url")}, sort_keys=False)


def _repo(payload: Any, response: ApiResponse) -> str:
    payload = _require_object(payload, response)
    return dict_to_pretty_json({"repo": payload.get("name"), "html_url": payload.get("html_url")},
                               sort_keys=False)


def _everything(payload: Any, response: ApiResponse) -> str:
    return dict_to_pretty_json(payload)


MEMBERS = ProjectionSpec("members", _members_lines)
MEMBERSHIP = ProjectionSpec("membership", _membership)
PAGES = ProjectionSpec("pages", _pages)
REPO = ProjectionSpec("repo", _repo)
INVITE = ProjectionSpec("invite", _everything)


def decode_json(response: ApiResponse) -> Any:
    try:
        return json.loads(response.body)
    except ValueError as e:
        raise ProjectionError("Response is not valid JSON: %s" % e, response.status_code, response.body) from e


def project(response: ApiResponse, spec: ProjectionSpec, verbose: bool) -> str:
    payload = decode_json(response)
    if verbose:
        return dict_to_pretty_json(payload)
    return spec.narrow(payload, response)


def render_raw(response: ApiResponse) -> str:
    """The response as curl -i would show it: status line, headers, blank line, body."""
    lines = ["HTTP %d" % response.status_code]
    lines += ["%s: %s" % (name, value) for name, value in response.headers.items()]
    lines.append("")
    lines.append(response.body)
    return "\n".join(lines)


def render_status(response: ApiResponse) -> str:
    return str(response.status_code)
