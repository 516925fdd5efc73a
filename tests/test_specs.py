"""Tests for list-file loading and entry validation."""

import pytest

from modlists.errors import SpecError
from modlists.specs import ListSpec, load_list_file, spec_from_dict, validate_format


def _write(tmp_path, text):
    path = tmp_path / "lists.yml"
    path.write_text(text, encoding="utf-8")
    return path


class TestSpecFromDict:

    def test_minimal_entry(self):
        spec = spec_from_dict({"name": "Day01", "url": "http://x/1"})
        assert spec == ListSpec(name="Day01", url="http://x/1")
        assert spec.source_urls == ["http://x/1"]

    def test_extract_urls_replace_primary_url(self):
        spec = spec_from_dict(
            {"name": "A", "url": "http://x/index", "extract_urls": ["http://x/1", "http://x/2"]}
        )
        assert spec.source_urls == ["http://x/1", "http://x/2"]

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"url": "http://x"}, "'name' is required"),
            ({"name": "A", "url": "  "}, "'url' is required"),
            ({"name": "A", "url": "http://x", "colour": "red"}, "unknown keys"),
            ({"name": "A", "url": "http://x", "add_modules": "Moose"}, "list of strings"),
            ({"name": "A", "url": "http://x", "extract_opts": ["x"]}, "must be a mapping"),
            ({"name": "A", "url": "http://x", "extract_opts": {"depth": 2}}, "unknown extract_opts"),
            ("not a mapping", "expected a mapping"),
            ({"name": "../../../escaped", "url": "http://x"}, "Invalid module name"),
            ({"name": "A::B", "url": "http://x"}, "Invalid module name"),
            ({"name": "Day-1", "url": "http://x"}, "Invalid module name"),
            ({"name": "A", "url": "http://x", "extract_opts": {"from_text": "no"}}, "true or false"),
            ({"name": "A", "url": "http://x", "extract_opts": {"selector": 5}}, "non-empty string"),
            ({"name": "A", "url": "http://x", "extract_opts": {"selector": "p[href"}}, "valid CSS"),
            ({"name": "A", "url": "http://x", "extract_opts": {"exclude": "Foo::Bar"}}, "list of regular"),
            ({"name": "A", "url": "http://x", "extract_opts": {"exclude": ["Foo(::"]}}, "is invalid"),
        ],
    )
    def test_invalid_entries(self, data, message):
        with pytest.raises(SpecError, match=message):
            spec_from_dict(data, 3)

    def test_valid_extract_opts_kept(self):
        opts = {"from_links": False, "selector": "article p", "exclude": [r"Moose(::.*)?"]}
        spec = spec_from_dict({"name": "Day_01", "url": "http://x", "extract_opts": opts})
        assert spec.extract_opts == opts

    def test_error_names_position(self):
        with pytest.raises(SpecError, match=r"modules\[3\]"):
            spec_from_dict({"name": "A"}, 3)


class TestLoadListFile:

    def test_mapping_with_namespace(self, tmp_path):
        path = _write(
            tmp_path,
            """
namespace: Acme::CPANLists::Import::PerlAdvent
modules:
  - name: Day01
    url: http://perladvent.org/2014/2014-12-01.html
    summary: Day 1
    extract_opts:
      from_text: false
    add_modules: ["Extra::Mod"]
  - name: Day02
    url: http://perladvent.org/2014/2014-12-02.html
""",
        )
        list_file = load_list_file(path)

        assert list_file.namespace == "Acme::CPANLists::Import::PerlAdvent"
        assert [s.name for s in list_file.specs] == ["Day01", "Day02"]
        assert list_file.specs[0].extract_opts == {"from_text": False}
        assert list_file.specs[0].add_modules == ["Extra::Mod"]

    def test_top_level_list(self, tmp_path):
        path = _write(tmp_path, "- name: A\n  url: http://x/a\n")
        list_file = load_list_file(path)
        assert list_file.namespace is None
        assert list_file.specs[0].name == "A"

    def test_duplicates_left_for_builder(self, tmp_path):
        path = _write(tmp_path, "- {name: A, url: 'http://x/a'}\n- {name: A, url: 'http://x/b'}\n")
        assert len(load_list_file(path).specs) == 2

    @pytest.mark.parametrize(
        "text,message",
        [
            ("modules: [", "Invalid YAML"),
            ("just a string", "expected a mapping"),
            ("namespace: X\nmodules: []\n", "non-empty list"),
            ("namespace: [X]\nmodules:\n  - {name: A, url: 'http://x'}\n", "'namespace' must be"),
            (
                "modules:\n  - name: A\n    url: 'http://x'\n    extract_opts: {exclude: ['Foo(::']}\n",
                r"modules\[0\]: extract_opts.exclude pattern",
            ),
        ],
    )
    def test_invalid_files(self, tmp_path, text, message):
        with pytest.raises(SpecError, match=message):
            load_list_file(_write(tmp_path, text))

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpecError, match="Cannot read list file"):
            load_list_file(tmp_path / "absent.yml")


class TestValidateFormat:

    def test_known_formats(self):
        assert validate_format("perl") == "perl"
        assert validate_format("python") == "python"

    def test_unknown_format(self):
        with pytest.raises(SpecError, match="Unknown output format 'ruby'"):
            validate_format("ruby")
