"""Tests for the SQLite-backed local package index."""

import gzip
import sqlite3

import pytest

from modlists.errors import IndexQueryError
from modlists.index import LocalIndex, load_packages_file, parse_packages_file

PACKAGES = """File:         02packages.details.txt
URL:          http://www.perl.com/CPAN/modules/02packages.details.txt
Description:  Package names found in directory $CPAN/authors/id/
Line-Count:   4

Moose                       2.2206  E/ET/ETHER/Moose-2.2206.tar.gz
Moose::Util                  undef  E/ET/ETHER/Moose-2.2206.tar.gz
Try::Tiny                     0.31  E/ET/ETHER/Try-Tiny-0.31.tar.gz
this line is broken
Data::Dumper                 2.183  X/XS/XSAWYERX/Data-Dumper-2.183.tar.gz
"""


class TestLocalIndex:

    def test_lookup_returns_indexed_subset(self, index_db):
        found = LocalIndex(index_db).lookup(["Moose", "Not::There", "Try::Tiny"])
        assert found == {"Moose", "Try::Tiny"}

    def test_lookup_is_exact_and_case_sensitive(self, index_db):
        assert LocalIndex(index_db).lookup(["moose", "Moo"]) == set()

    def test_lookup_large_batches(self, index_db):
        names = [f"Gen::Mod{i}" for i in range(1200)] + ["Moo::Role"]
        assert LocalIndex(index_db).lookup(names) == {"Moo::Role"}

    def test_missing_database_is_query_failure(self, tmp_path):
        with pytest.raises(IndexQueryError) as exc_info:
            LocalIndex(tmp_path / "nope.db").lookup(["Moose"])
        assert exc_info.value.code == 404
        assert "index load" in str(exc_info.value)

    def test_database_without_table_is_query_failure(self, tmp_path):
        db = tmp_path / "empty.db"
        sqlite3.connect(db).close()

        with pytest.raises(IndexQueryError) as exc_info:
            LocalIndex(db).lookup(["Moose"])
        assert exc_info.value.code == 500
        assert isinstance(exc_info.value.__cause__, sqlite3.Error)


class TestPackagesFile:

    def test_parse_skips_header_and_malformed_lines(self, tmp_path):
        path = tmp_path / "02packages.details.txt"
        path.write_text(PACKAGES, encoding="utf-8")

        rows = list(parse_packages_file(path))
        assert rows == [
            ("Moose", "2.2206", "E/ET/ETHER/Moose-2.2206.tar.gz"),
            ("Moose::Util", None, "E/ET/ETHER/Moose-2.2206.tar.gz"),
            ("Try::Tiny", "0.31", "E/ET/ETHER/Try-Tiny-0.31.tar.gz"),
            ("Data::Dumper", "2.183", "X/XS/XSAWYERX/Data-Dumper-2.183.tar.gz"),
        ]

    def test_load_gzipped_file_then_query(self, tmp_path):
        path = tmp_path / "02packages.details.txt.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(PACKAGES)
        db = tmp_path / "sub" / "index.db"

        assert load_packages_file(db, path) == 4
        assert LocalIndex(db).lookup(["Moose::Util", "Data::Dumper", "Foo"]) == {
            "Moose::Util",
            "Data::Dumper",
        }

    def test_reload_replaces_previous_rows(self, tmp_path):
        first = tmp_path / "first.txt"
        first.write_text("Header: x\n\nOld::Mod 1 A/AU/AUTHOR/Old-1.tar.gz\n")
        second = tmp_path / "second.txt"
        second.write_text("Header: x\n\nNew::Mod 1 A/AU/AUTHOR/New-1.tar.gz\n")
        db = tmp_path / "index.db"

        load_packages_file(db, first)
        load_packages_file(db, second)

        assert LocalIndex(db).lookup(["Old::Mod", "New::Mod"]) == {"New::Mod"}
