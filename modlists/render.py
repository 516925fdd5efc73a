"""Render generated module files.

Two output flavours share one data shape::

    {"summary": ..., "description": ..., "entries": [{"module": name}, ...]}

``perl`` writes a ``.pm`` file declaring ``our @Module_Lists``; ``python``
writes a ``.py`` file declaring ``MODULE_LISTS``.
"""

import pprint
import re
from dataclasses import dataclass
from typing import Any

from modlists import __version__

_BAREWORD_KEY = re.compile(r"-?[A-Za-z_]\w*|-?(?:0|[1-9][0-9]{0,8})", re.ASCII)
_BARE_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]{0,14})")

_PERL_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "$": "\\$",
    "@": "\\@",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\f": "\\f",
    "\b": "\\b",
    "\a": "\\a",
    "\x1b": "\\e",
}


def describe_source(url: str, date: str) -> str:
    """Text for the list's ``description`` field."""
    return (
        f"This list is generated by extracting module names mentioned in [{url}] "
        f"(retrieved on {date}). Visit the URL for the full contents."
    )


def make_module_list(summary: str | None, url: str, date: str, names: list[str]) -> dict[str, Any]:
    return {
        "summary": summary,
        "description": describe_source(url, date),
        "entries": [{"module": name} for name in names],
    }


def namespace_parts(namespace: str) -> list[str]:
    """Split ``A::B`` or ``a.b`` (or ``a/b``) into its components."""
    parts = re.split(r"::|[./]", namespace.strip())
    return [p for p in parts if p]


def perl_string(value: str) -> str:
    """Double-quoted Perl string, escaped the way Data::Dmp does it.

    Named escapes for common controls, octal for the rest of the C0 range and
    DEL (three digits when a digit follows), ``\\x{HEX}`` above ASCII.
    """
    out = []
    for i, ch in enumerate(value):
        code = ord(ch)
        if ch in _PERL_ESCAPES:
            out.append(_PERL_ESCAPES[ch])
        elif code < 0x20:
            next_is_digit = i + 1 < len(value) and value[i + 1] in "0123456789"
            out.append(f"\\{code:03o}" if next_is_digit else f"\\{code:o}")
        elif code == 0x7F:
            out.append("\\177")
        elif code > 0x7E:
            out.append(f"\\x{{{code:X}}}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def dump_perl(value: Any) -> str:
    """Compact Perl literal for a Python value (hash keys sorted)."""
    if value is None:
        return "undef"
    if isinstance(value, bool):
        return "1" if value else '""'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value if _BARE_NUMBER.fullmatch(value) else perl_string(value)
    if isinstance(value, dict):
        items = []
        for key in sorted(value):
            k = str(key)
            k = k if _BAREWORD_KEY.fullmatch(k) else perl_string(k)
            items.append(f"{k}=>{dump_perl(value[key])}")
        return "{" + ",".join(items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(dump_perl(v) for v in value) + "]"
    raise TypeError(f"Cannot dump {type(value).__name__} as Perl")


@dataclass
class RenderContext:
    namespace: str
    name: str
    url: str
    date: str
    module_list: dict[str, Any]
    note: str | None = None


class PerlRenderer:
    ext = "pm"

    def package_name(self, namespace: str, name: str) -> str:
        return "::".join([*namespace_parts(namespace), name])

    def render(self, ctx: RenderContext) -> str:
        summary = ctx.module_list.get("summary") or ""
        lines = [
            f"package {self.package_name(ctx.namespace, ctx.name)};\n",
            "\n",
            "# DATE\n",
            "# VERSION\n",
            "\n",
            f"our @Module_Lists = ({dump_perl(ctx.module_list)});\n",
            "\n",
            "1;\n",
            f"# ABSTRACT: {summary}\n",
            "\n",
            "=head1 DESCRIPTION\n",
            "\n",
            f"This module is generated by extracting module names mentioned in L<{ctx.url}> "
            f"(retrieved on {ctx.date}). Visit the URL for the full contents.\n",
            f"\n{ctx.note}\n\n" if ctx.note else "",
            "\n",
        ]
        return "".join(lines)


class PythonRenderer:
    ext = "py"

    def package_name(self, namespace: str, name: str) -> str:
        return ".".join([*namespace_parts(namespace), name])

    def render(self, ctx: RenderContext) -> str:
        summary = ctx.module_list.get("summary") or ""
        doc = [summary, "", f"Generated from {ctx.url} (retrieved on {ctx.date})."]
        if ctx.note:
            doc += ["", ctx.note]
        docstring = _escape_docstring("\n".join(doc).strip())

        return (
            f'"""{docstring}\n"""\n'
            "\n"
            f"# Generated by modlists {__version__} as {self.package_name(ctx.namespace, ctx.name)}.\n"
            "# Do not edit; rerun the build instead.\n"
            "\n"
            f"MODULE_LISTS = {pprint.pformat([ctx.module_list], sort_dicts=False, width=88)}\n"
        )


def _escape_docstring(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


RENDERERS = {
    "perl": PerlRenderer(),
    "python": PythonRenderer(),
}
