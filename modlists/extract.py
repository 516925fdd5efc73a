"""Extract Perl module names mentioned in an HTML page."""

import re
from typing import Any, Protocol
from urllib.parse import unquote, urlparse

import soupsieve
from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from modlists.errors import SpecError

MODULE_NAME = re.compile(r"^[A-Za-z_]\w*(?:::\w+)*$")

# Qualified names in running text; a bare word is too ambiguous to count
TEXT_MODULE = re.compile(r"(?<![\w:])[A-Za-z_]\w*(?:::\w+)+(?!\w|::\w)")

_LIB_PM = re.compile(r"/lib/((?:\w+/)*\w+)\.pm$")

# Option names accepted by HtmlModuleExtractor.extract
EXTRACT_OPTIONS = frozenset({"from_links", "from_text", "selector", "exclude"})


def check_extract_opts(opts: dict[str, Any]) -> dict[str, Any]:
    """Validate option names and values for ``HtmlModuleExtractor.extract``.

    Raises:
        SpecError: unknown option, wrong type, bad selector or bad exclude pattern
    """
    unknown = set(opts) - EXTRACT_OPTIONS
    if unknown:
        raise SpecError(
            f"unknown extract_opts {sorted(unknown)} "
            f"(known: {', '.join(sorted(EXTRACT_OPTIONS))})"
        )

    for key in ("from_links", "from_text"):
        if key in opts and not isinstance(opts[key], bool):
            raise SpecError(f"extract_opts.{key} must be true or false")

    selector = opts.get("selector")
    if selector is not None:
        if not isinstance(selector, str) or not selector.strip():
            raise SpecError("extract_opts.selector must be a non-empty string")
        try:
            soupsieve.compile(selector)
        except soupsieve.SelectorSyntaxError as e:
            raise SpecError(f"extract_opts.selector is not a valid CSS selector: {e}") from e

    exclude = opts.get("exclude")
    if exclude is not None:
        if not isinstance(exclude, list) or not all(isinstance(p, str) for p in exclude):
            raise SpecError("extract_opts.exclude must be a list of regular expressions")
        for pattern in exclude:
            try:
                re.compile(pattern)
            except re.error as e:
                raise SpecError(f"extract_opts.exclude pattern {pattern!r} is invalid: {e}") from e

    return opts


class Extractor(Protocol):
    """Turns page HTML plus options into an ordered, duplicate-free list of names."""

    def extract(self, html: str, **opts: Any) -> list[str]: ...


def module_from_url(href: str) -> str | None:
    """Return the module a documentation link points at, if any."""
    parsed = urlparse(href)
    host = parsed.netloc.lower()
    path = unquote(parsed.path)

    if host.endswith("metacpan.org"):
        for prefix in ("/pod/", "/module/"):
            if path.startswith(prefix) and not path.startswith("/pod/release/"):
                return _valid(path[len(prefix):])
        m = _LIB_PM.search(path)
        if m:
            return _valid(m.group(1).replace("/", "::"))
        return None

    if host.endswith("search.cpan.org"):
        if path.rstrip("/") == "/perldoc" and parsed.query:
            return _valid(unquote(parsed.query))
        if path.startswith("/perldoc/"):
            return _valid(path[len("/perldoc/"):])
        m = _LIB_PM.search(path)
        if m:
            return _valid(m.group(1).replace("/", "::"))
        return None

    if host == "perldoc.perl.org":
        name = path.strip("/")
        if name.endswith(".html"):
            name = name[: -len(".html")].replace("/", "::")
        # Core pod pages (perlfunc, perlre, ...) are lowercase
        if name[:1].isupper():
            return _valid(name)
        return None

    return None


def _valid(name: str) -> str | None:
    name = name.strip()
    return name if MODULE_NAME.match(name) else None


class HtmlModuleExtractor:
    """Default extraction capability backed by BeautifulSoup.

    Walks the document in order so the result reflects where each name was
    first mentioned, whether as a link target or in visible text.
    """

    def extract(
        self,
        html: str,
        *,
        from_links: bool = True,
        from_text: bool = True,
        selector: str | None = None,
        exclude: list[str] | None = None,
    ) -> list[str]:
        check_extract_opts(
            {
                "from_links": from_links,
                "from_text": from_text,
                "selector": selector,
                "exclude": exclude,
            }
        )
        soup = BeautifulSoup(html, "html.parser")

        for element in soup(["script", "style", "noscript"]):
            element.decompose()

        root = soup
        if selector:
            selected = soup.select_one(selector)
            if selected is not None:
                root = selected

        excluded = [re.compile(pattern) for pattern in (exclude or [])]

        names: list[str] = []
        seen: set[str] = set()

        def add(name: str | None) -> None:
            if not name or name in seen:
                return
            if any(p.fullmatch(name) for p in excluded):
                return
            seen.add(name)
            names.append(name)

        for node in root.descendants:
            if isinstance(node, Tag):
                if from_links and node.name == "a" and node.get("href"):
                    add(module_from_url(node["href"]))
            elif isinstance(node, NavigableString) and not isinstance(node, Comment):
                if from_text:
                    for match in TEXT_MODULE.finditer(str(node)):
                        add(match.group(0))

        return names
