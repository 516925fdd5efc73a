"""List entries, build options and the YAML list-file loader."""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from modlists.errors import SpecError
from modlists.extract import check_extract_opts
from modlists.render import RENDERERS


@dataclass
class ListSpec:
    """One module list to generate."""

    name: str
    url: str
    summary: str | None = None
    extract_urls: list[str] | None = None
    extract_opts: dict[str, Any] = field(default_factory=dict)
    note: str | None = None
    add_modules: list[str] | None = None

    @property
    def source_urls(self) -> list[str]:
        """URLs to extract from: the explicit list if given, else the primary URL."""
        return list(self.extract_urls) if self.extract_urls else [self.url]


@dataclass
class BuildOptions:
    cache: bool = True
    user_agent: str | None = None
    output_dir: str = field(default_factory=os.getcwd)
    exclude_unindexed: bool = True
    format: str = "perl"


@dataclass
class ListFile:
    """Parsed list file: a namespace plus its entries."""

    namespace: str | None
    specs: list[ListSpec]


_FIELDS = {"name", "url", "summary", "extract_urls", "extract_opts", "note", "add_modules"}

# One namespace component; becomes both a file name and a package name
ENTRY_NAME = re.compile(r"[A-Za-z_]\w*", re.ASCII)


def validate_name(name: str) -> str:
    if not ENTRY_NAME.fullmatch(name):
        raise SpecError(
            f"Invalid module name '{name}' (expected a single identifier such as 'Day01')"
        )
    return name


def spec_from_dict(data: dict[str, Any], position: int = 0) -> ListSpec:
    """Validate one raw mapping and turn it into a ListSpec."""
    where = f"modules[{position}]"
    if not isinstance(data, dict):
        raise SpecError(f"{where}: expected a mapping, got {type(data).__name__}")

    unknown = set(data) - _FIELDS
    if unknown:
        raise SpecError(f"{where}: unknown keys {sorted(unknown)}")

    for key in ("name", "url"):
        if not isinstance(data.get(key), str) or not data[key].strip():
            raise SpecError(f"{where}: '{key}' is required and must be a non-empty string")

    try:
        validate_name(data["name"].strip())
    except SpecError as e:
        raise SpecError(f"{where}: {e}") from e

    for key in ("extract_urls", "add_modules"):
        value = data.get(key)
        if value is not None and (
            not isinstance(value, list) or not all(isinstance(v, str) for v in value)
        ):
            raise SpecError(f"{where}: '{key}' must be a list of strings")

    opts = data.get("extract_opts") or {}
    if not isinstance(opts, dict):
        raise SpecError(f"{where}: 'extract_opts' must be a mapping")
    try:
        check_extract_opts(opts)
    except SpecError as e:
        raise SpecError(f"{where}: {e}") from e

    return ListSpec(
        name=data["name"].strip(),
        url=data["url"].strip(),
        summary=data.get("summary"),
        extract_urls=data.get("extract_urls"),
        extract_opts=dict(opts),
        note=data.get("note"),
        add_modules=data.get("add_modules"),
    )


def load_list_file(path: str | Path) -> ListFile:
    """Load a YAML list file.

    Duplicate names are left for the builder to report, so that a run
    fails at the same point whether entries come from a file or from code.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SpecError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise SpecError(f"Cannot read list file {path}: {e}") from e

    if isinstance(data, list):
        data = {"modules": data}
    if not isinstance(data, dict):
        raise SpecError(f"{path}: expected a mapping with 'namespace' and 'modules'")

    modules = data.get("modules")
    if not isinstance(modules, list) or not modules:
        raise SpecError(f"{path}: 'modules' must be a non-empty list")

    namespace = data.get("namespace")
    if namespace is not None and not isinstance(namespace, str):
        raise SpecError(f"{path}: 'namespace' must be a string")

    return ListFile(
        namespace=namespace,
        specs=[spec_from_dict(entry, i) for i, entry in enumerate(modules)],
    )


def validate_format(fmt: str) -> str:
    if fmt not in RENDERERS:
        raise SpecError(f"Unknown output format '{fmt}' (expected one of: {', '.join(RENDERERS)})")
    return fmt
