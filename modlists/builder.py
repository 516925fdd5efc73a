"""Build module-list files from the package names web pages mention.

Pipeline per list entry, strictly sequential:

1. fetch each source URL, or read it from the page cache when fresh
2. extract module names and merge them in first-seen order
3. optionally drop names the local index does not know
4. append force-added names
5. render and write ``lib/<namespace>/<name>.<ext>``

Any failure aborts the whole run; files written for earlier entries stay.
"""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from modlists.cache import PageCache
from modlists.errors import (
    DuplicateNameError,
    EmptyResultError,
    IndexQueryError,
    ListBuildError,
    SpecError,
)
from modlists.extract import Extractor, HtmlModuleExtractor
from modlists.fetcher import Fetcher, UrllibFetcher
from modlists.index import IndexLookup, LocalIndex
from modlists.render import RENDERERS, RenderContext, make_module_list, namespace_parts
from modlists.specs import ENTRY_NAME, BuildOptions, ListSpec, validate_format, validate_name
from modlists.utils.constants import CACHE_DIR_NAME, DEFAULT_INDEX_DB, LIB_DIR_NAME
from modlists.utils.logging import logger


@dataclass
class BuildResult:
    status: int = 200
    written: list[Path] = field(default_factory=list)


class ListBuilder:
    """Runs the pipeline with injectable fetch, extraction and index collaborators.

    Collaborators left as ``None`` get the defaults: ``UrllibFetcher`` with the
    options' User-Agent, ``HtmlModuleExtractor`` and a ``LocalIndex`` over the
    default index database (only opened when index filtering is on).
    """

    def __init__(
        self,
        fetcher: Fetcher | None = None,
        extractor: Extractor | None = None,
        index: IndexLookup | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.fetcher = fetcher
        self.extractor = extractor or HtmlModuleExtractor()
        self.index = index
        self.clock = clock

    def build(
        self,
        specs: Sequence[ListSpec],
        namespace: str,
        options: BuildOptions | None = None,
    ) -> BuildResult:
        options = options or BuildOptions()
        if not specs:
            raise SpecError("No module lists given")
        parts = namespace_parts(namespace)
        if not parts or not all(ENTRY_NAME.fullmatch(part) for part in parts):
            raise SpecError(f"Invalid namespace '{namespace}'")
        for spec in specs:
            validate_name(spec.name)
        renderer = RENDERERS[validate_format(options.format)]

        output_dir = Path(options.output_dir)
        fetcher = self.fetcher or UrllibFetcher(user_agent=options.user_agent)
        cache = PageCache(output_dir / CACHE_DIR_NAME, clock=self.clock)
        lib_dir = output_dir / LIB_DIR_NAME / Path(*parts)
        now = self.clock()

        result = BuildResult()
        seen: set[str] = set()

        for spec in specs:
            logger.info("Processing {name} ...", name=spec.name)

            if spec.name in seen:
                raise DuplicateNameError(spec.name)
            seen.add(spec.name)

            names, date = self._collect_names(spec, cache, fetcher, options.cache, now)

            if options.exclude_unindexed and names:
                names = self._filter_indexed(names)

            if spec.add_modules:
                names.extend(spec.add_modules)

            if not names:
                raise EmptyResultError(spec.name)

            module_path = lib_dir / f"{spec.name}.{renderer.ext}"
            text = renderer.render(
                RenderContext(
                    namespace=namespace,
                    name=spec.name,
                    url=spec.url,
                    date=date,
                    module_list=make_module_list(spec.summary, spec.url, date, names),
                    note=spec.note,
                )
            )

            logger.info("Writing module {path} ...", path=str(module_path))
            module_path.parent.mkdir(parents=True, exist_ok=True)
            module_path.write_text(text, encoding="utf-8")
            result.written.append(module_path)

        return result

    def _collect_names(
        self,
        spec: ListSpec,
        cache: PageCache,
        fetcher: Fetcher,
        use_cache: bool,
        now: float,
    ) -> tuple[list[str], str]:
        """Fetch or read every source URL and merge the extracted names."""
        names: list[str] = []
        seen: set[str] = set()
        date: str | None = None

        for url in spec.source_urls:
            cached = cache.lookup(url) if use_cache else None
            if cached is None:
                logger.info("Retrieving {url} ...", url=url)
                content = fetcher.get(url)
                cache.store(url, content)
                if date is None:
                    date = _format_date(now)
            else:
                logger.info("Using cache file {path}", path=str(cached.path))
                content = cached.content
                if date is None:
                    date = _format_date(cached.mtime)

            extracted = self.extractor.extract(content, **spec.extract_opts)
            logger.debug("Extracted module names: {names}", names=extracted)

            for name in extracted:
                if name not in seen:
                    seen.add(name)
                    names.append(name)

        return names, date

    def _filter_indexed(self, names: list[str]) -> list[str]:
        index = self.index or LocalIndex(DEFAULT_INDEX_DB)
        try:
            indexed = index.lookup(names)
        except ListBuildError:
            raise
        except Exception as e:
            raise IndexQueryError(f"Can't list modules in local index: {e}") from e

        included = [name for name in names if name in indexed]
        excluded = [name for name in names if name not in indexed]
        if excluded:
            logger.debug(
                "Excluded module names (not indexed on local index): {names}", names=excluded
            )
        return included


def _format_date(timestamp: float) -> str:
    return time.strftime("%Y-%m-%d", time.localtime(timestamp))


def build(
    specs: Sequence[ListSpec],
    namespace: str,
    options: BuildOptions | None = None,
    *,
    fetcher: Fetcher | None = None,
    extractor: Extractor | None = None,
    index: IndexLookup | None = None,
) -> BuildResult:
    """Build every list in ``specs`` under ``namespace``. See ``ListBuilder``."""
    return ListBuilder(fetcher=fetcher, extractor=extractor, index=index).build(
        specs, namespace, options
    )
