# dbw_config.py
# Available subject to the Apache 2.0 License
# https://www.apache.org/licenses/LICENSE-2.0

# Settings for dbw. Every value can be given here, or (preferred) through the
# environment or a .env file in the directory you run dbw from. The
# environment always wins over what's written in this file.

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dbw_errors import ConfigError

# reported by "dbw --version" and in the User-Agent header
VERSION = "1.0.0"

# base URL of the GitHub REST API, e.g. "https://api.github.com"
default_github_api_url = ""

# your GitHub organization (https://github.com/Organization/Repository/...)
default_github_organization = ""

# your GitHub API token here, inside the quotation marks
# https://github.com/settings/tokens
default_github_token = ""

# for use with "dbw expire": base URL of the private course API and its token
default_expire_api_url = ""
default_expire_token = ""

# environment variable -> (Credentials field, default)
ENVIRONMENT = {
    "GITHUB_API_URL": ("github_api_url", default_github_api_url),
    "GITHUB_ORGANISATION": ("organization", default_github_organization),
    "GITHUB_ACCESS_TOKEN": ("github_token", default_github_token),
    "BASE_URL": ("expire_api_url", default_expire_api_url),
    "ACCESS_TOKEN": ("expire_token", default_expire_token),
}

SCOPES = {
    "github": ("GITHUB_API_URL", "GITHUB_ORGANISATION", "GITHUB_ACCESS_TOKEN"),
    "expire": ("BASE_URL", "ACCESS_TOKEN"),
}


@dataclass(frozen=True)
class Credentials:
    github_api_url: str = ""
    organization: str = ""
    github_token: str = field(default="", repr=False)
    expire_api_url: str = ""
    expire_token: str = field(default="", repr=False)


def resolve(scope: str = "github", environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """
    Reads the settings dbw needs from the environment, falling back to the defaults in this file.

    The scope says which command family is about to run: "github" needs the API URL, organization and
    token, "expire" needs the private API URL and its token. If any of those is missing or empty, this
    raises ConfigError naming the missing variables (never their values), before anything touches the
    network.
    """
    if scope not in SCOPES:
        raise ValueError("unknown credential scope: " + scope)
    if environ is None:
        environ = os.environ

    values = {}
    for variable, (name, default) in ENVIRONMENT.items():
        values[name] = environ.get(variable, default).strip()

    missing = [variable for variable in SCOPES[scope] if values[ENVIRONMENT[variable][0]] == ""]
    if missing:
        raise ConfigError("Missing configuration: %s (set it in the environment or in .env)"
                          % ", ".join(missing))

    values["github_api_url"] = values["github_api_url"].rstrip("/")
    values["expire_api_url"] = values["expire_api_url"].rstrip("/")
    return Credentials(**values)
