# dbw_errors.py
# Available subject to the Apache 2.0 License
# https://www.apache.org/licenses/LICENSE-2.0

# Everything that can go wrong in dbw ends up as one of these. The dispatcher
# prints the message and exits with the exit_code of the class.

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILURE = 2

SNIPPET_LENGTH = 500


def snippet(text: str, limit: int = SNIPPET_LENGTH) -> str:
    """Shortens a response body so that it fits into an error message."""
    if text is None:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + "... (%d more characters)" % (len(text) - limit)


class DbwError(Exception):
    exit_code = EXIT_FAILURE


class UsageError(DbwError):
    """Bad command line: unknown option or command, or no command at all."""
    exit_code = EXIT_USAGE


class UnknownCommandError(UsageError):
    def __init__(self, command: str):
        super().__init__("Unknown command '%s'." % command)
        self.command = command


class UnknownFlagError(UsageError):
    def __init__(self, flag: str):
        super().__init__("Unknown option '%s'." % flag)
        self.flag = flag


class ArityError(DbwError):
    """Wrong number of arguments for a known command. Exits 2 like any other failure of a bound command."""

    def __init__(self, command: str, expected: str, given: int):
        super().__init__("The command '%s' requires %s, got %d. For an overview of the command, execute: dbw --help"
                         % (command, expected, given))
        self.command = command
        self.given = given


class ConfigError(DbwError):
    pass


class TransportError(DbwError):
    """The request never got an answer (DNS, TLS, refused connection, ...)."""
    pass


class ApiError(DbwError):
    """The API answered, but not with a 2xx status."""

    def __init__(self, status_code: int, url: str, body: str):
        super().__init__("Request failed, status code: %d (%s)\nBody: %s" % (status_code, url, snippet(body)))
        self.status_code = status_code
        self.url = url
        self.body = body


class ProjectionError(DbwError):
    """The response body could not be turned into the output the command promises."""

    def __init__(self, reason: str, status_code: int, body: str):
        super().__init__("%s (status code: %d)\nBody: %s" % (reason, status_code, snippet(body)))
        self.status_code = status_code
        self.body = body
