"""Error kinds raised while building module lists.

Every error carries an HTTP-like ``code`` and a stable ``kind`` string so
callers can branch on the failure without parsing messages.
"""


class ListBuildError(Exception):
    """Base class for all fatal build errors."""

    kind = "build-error"
    code = 500

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code

    @property
    def message(self) -> str:
        return str(self)


class DuplicateNameError(ListBuildError):
    """Two list entries in one run share a name."""

    kind = "duplicate-name"
    code = 409

    def __init__(self, name: str):
        super().__init__(f"Duplicate module name '{name}'")
        self.name = name


class FetchError(ListBuildError):
    """A source page could not be retrieved."""

    kind = "fetch-failure"
    code = 500

    def __init__(self, url: str, status_line: str):
        super().__init__(f"Can't get {url}: {status_line}")
        self.url = url
        self.status_line = status_line


class IndexQueryError(ListBuildError):
    """The local package index could not be queried."""

    kind = "index-query-failure"
    code = 500


class EmptyResultError(ListBuildError):
    """No names survived extraction, filtering and force-adds."""

    kind = "empty-result"
    code = 412

    def __init__(self, name: str):
        super().__init__(f"No module names found for {name}")
        self.name = name


class SpecError(ListBuildError):
    """The list file or a list entry is malformed."""

    kind = "invalid-spec"
    code = 400
