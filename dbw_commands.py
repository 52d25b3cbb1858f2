# dbw_commands.py
# Available subject to the Apache 2.0 License
# https://www.apache.org/licenses/LICENSE-2.0

# One function per dbw command, and the registry the dispatcher looks them up in.
# Each handler takes a ParsedInvocation and returns the text to print on stdout.

import re
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple
from urllib.parse import quote

import iso8601

import dbw_config
from dbw_errors import ApiError, ArityError
from dbw_gateway import (ApiRequest, expire_headers, fail_on_github_errors, github_headers,
                         localtime_from_iso_datestr, send)
from dbw_projector import (INVITE, MEMBERS, MEMBERSHIP, PAGES, REPO, decode_json, project, render_raw,
                           render_status)

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}", re.IGNORECASE)

INVITE_ROLE = "direct_member"

# GitHub caps per_page at 100, but this is what we've always asked for
PAGE_QUERY = "per_page=500&page=1"


@dataclass(frozen=True)
class Command:
    name: str
    min_args: int
    max_args: int
    handler: Callable[["ParsedInvocation"], str] = field(repr=False)
    usage: str = ""
    help: str = ""

    def expected(self) -> str:
        if self.min_args == self.max_args:
            return "exactly %d argument%s" % (self.min_args, "" if self.min_args == 1 else "s")
        return "%d to %d arguments" % (self.min_args, self.max_args)

    def check_arity(self, args: Tuple[str, ...]):
        if not self.min_args <= len(args) <= self.max_args:
            raise ArityError(self.name, self.expected(), len(args))

    def invoke(self, invocation: "ParsedInvocation") -> str:
        self.check_arity(invocation.args)
        return self.handler(invocation)


@dataclass(frozen=True)
class ParsedInvocation:
    command: Optional[Command] = None
    args: Tuple[str, ...] = ()
    verbose: bool = False


def note(invocation: ParsedInvocation, message: str):
    """Progress chatter for --verbose. Goes to stderr so that stdout stays pipeable."""
    if invocation.verbose:
        print(message, file=sys.stderr)


def segment(value: str) -> str:
    return quote(value, safe="")


def github_get(invocation: ParsedInvocation, credentials: dbw_config.Credentials, endpoint: str):
    request = ApiRequest("GET", credentials.github_api_url + "/" + endpoint, github_headers(credentials.github_token))
    note(invocation, request.url)
    return request, send(request)


def looks_like_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value) is not None


def app_invite(invocation: ParsedInvocation) -> str:
    """
    Invite a new member to the organization, either by email or by GitHub login. Anything that looks
    like an email address is sent as one; everything else is looked up as a login to find its numeric id.

    Which of the two it was ("Looks like an email." or the resolved "id=...") is only reported with
    --verbose, on stderr, so that stdout holds nothing but the invitation.
    """
    who = invocation.args[0]
    credentials = dbw_config.resolve("github")
    url = "%s/orgs/%s/invitations" % (credentials.github_api_url, segment(credentials.organization))

    if looks_like_email(who):
        note(invocation, "Looks like an email.")
        body = {"email": who, "role": INVITE_ROLE}
    else:
        note(invocation, "Does not look like an email, using it as a GitHub account name to lookup an id.")
        lookup_request, user = github_get(invocation, credentials, "users/" + segment(who))
        fail_on_github_errors(user, lookup_request)
        payload = decode_json(user)
        user_id = payload.get("id") if isinstance(payload, dict) else None
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise ApiError(user.status_code, lookup_request.url, "no numeric id for '%s' in: %s" % (who, user.body))
        note(invocation, "id=%d" % user_id)
        body = {"invitee_id": user_id, "role": INVITE_ROLE}

    request = ApiRequest("POST", url, github_headers(credentials.github_token), body)
    note(invocation, request.url)
    response = send(request)
    fail_on_github_errors(response, request)
    return project(response, INVITE, invocation.verbose)


def app_members(invocation: ParsedInvocation) -> str:
    credentials = dbw_config.resolve("github")
    org = segment(credentials.organization)
    if invocation.args:
        endpoint = "orgs/%s/teams/%s/members?%s" % (org, segment(invocation.args[0]), PAGE_QUERY)
    else:
        endpoint = "orgs/%s/members?%s" % (org, PAGE_QUERY)

    request, response = github_get(invocation, credentials, endpoint)
    fail_on_github_errors(response, request)
    return project(response, MEMBERS, invocation.verbose)


def app_membership(invocation: ParsedInvocation) -> str:
    credentials = dbw_config.resolve("github")
    endpoint = "orgs/%s/memberships/%s" % (segment(credentials.organization), segment(invocation.args[0]))
    request, response = github_get(invocation, credentials, endpoint)
    fail_on_github_errors(response, request)
    return project(response, MEMBERSHIP, invocation.verbose)


def app_pages(invocation: ParsedInvocation) -> str:
    credentials = dbw_config.resolve("github")
    endpoint = "repos/%s/%s/pages" % (segment(credentials.organization), segment(invocation.args[0]))
    request, response = github_get(invocation, credentials, endpoint)
    fail_on_github_errors(response, request)
    return project(response, PAGES, invocation.verbose)


def app_repo(invocation: ParsedInvocation) -> str:
    credentials = dbw_config.resolve("github")
    endpoint = "repos/%s/%s" % (segment(credentials.organization), segment(invocation.args[0]))
    request, response = github_get(invocation, credentials, endpoint)
    fail_on_github_errors(response, request)
    return project(response, REPO, invocation.verbose)


def app_user(invocation: ParsedInvocation) -> str:
    # no status check here: a 401 with its headers is exactly what you want to see when the token is bad
    credentials = dbw_config.resolve("github")
    request, response = github_get(invocation, credentials, "user")
    return render_raw(response)


def app_expire(invocation: ParsedInvocation) -> str:
    """
    Update the expires-at date of a student on the private course API. The answer is only the HTTP
    status code, whatever it is: a 404 for an unknown id is a result, not an error.
    """
    student_id, expire_at = invocation.args
    credentials = dbw_config.resolve("expire")

    if invocation.verbose:
        try:
            note(invocation, "expiresAt in local time: " + localtime_from_iso_datestr(expire_at))
        except iso8601.ParseError:
            note(invocation, "expiresAt is not an ISO 8601 date, sending it as given.")

    request = ApiRequest("PATCH", credentials.expire_api_url + "/" + segment(student_id),
                         expire_headers(credentials.expire_token), {"expiresAt": expire_at})
    note(invocation, request.url)
    return render_status(send(request))


COMMANDS: Dict[str, Command] = {c.name: c for c in [
    Command("invite", 1, 1, app_invite, "invite <email | acronym>",
            "Invite a new member to the org using email or GH user acronym."),
    Command("members", 0, 1, app_members, "members [team]",
            "Get all members of the organisation, or of a specific team."),
    Command("membership", 1, 1, app_membership, "membership <acronym>",
            "Check if acronym is member of the organisation."),
    Command("pages", 1, 1, app_pages, "pages <name>",
            "Get details of GitHub pages for a repo."),
    Command("repo", 1, 1, app_repo, "repo <name>",
            "Get details of a repo."),
    Command("user", 0, 0, app_user, "user",
            "Get details of your own user (troubleshoot the token)."),
    Command("expire", 2, 2, app_expire, "expire <id> <expire-at>",
            "Set the expires-at date of a student on the course API."),
]}


def lookup(name: str) -> Optional[Command]:
    return COMMANDS.get(name)
