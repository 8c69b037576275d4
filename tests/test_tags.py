# tests/test_tags.py
"""
Tests for the documentation tag scanner: first match, spelling
correction, duplicates, and the deletion span of duplicate fixes.
"""

import pytest

from override_jsdoc.diagnostics import EditKind, FindingKind
from override_jsdoc.tags import (
    OVERRIDE_TAG_COMMENT,
    is_override_tag,
    scan_override_tags,
)
from tests.conftest import SourceBuilder, make_context


def _scan(docs):
    b = SourceBuilder()
    cls = b.cls("Derived", extends=["Base"])
    member = b.member(cls, "m", docs=docs)
    source = b.build()
    ctx = make_context(source)
    return source, member, scan_override_tags(member.docs, ctx)


class TestTagPattern:

    @pytest.mark.parametrize("name", [
        "override", "Override", "OVERRIDE", "overide", "overrides", "Overides",
    ])
    def test_matches(self, name):
        assert is_override_tag(name)

    @pytest.mark.parametrize("name", [
        "overridden", "overrideX", "ovrride", "param", "xoverride", "",
    ])
    def test_does_not_match(self, name):
        assert not is_override_tag(name)

    def test_canonical_comment(self):
        assert OVERRIDE_TAG_COMMENT == "/** @override */ "


class TestScanFirstMatch:

    def test_no_docs(self):
        _, _, scan = _scan([])
        assert scan.found is None
        assert scan.diagnostics == ()

    def test_unrelated_tags_only(self):
        _, _, scan = _scan(["/** @param x the value\n   * @returns nothing */"])
        assert scan.found is None
        assert scan.diagnostics == ()

    def test_exact_tag_found_silently(self):
        _, _, scan = _scan(["/** @override */"])
        assert scan.found is not None
        assert scan.found.name == "override"
        assert scan.diagnostics == ()

    def test_tag_after_description(self):
        _, _, scan = _scan(["/**\n   * Renders the view.\n   * @override\n   */"])
        assert scan.found is not None
        assert scan.diagnostics == ()

    def test_inline_tag_text_is_not_a_tag(self):
        _, _, scan = _scan(["/** see {@override} and a@override */"])
        assert scan.found is None

    def test_found_is_first_match(self):
        source, _, scan = _scan(["/** @overrides */", "/** @override */"])
        assert scan.found.name == "overrides"


class TestSpelling:

    def test_misspelled_first_match(self):
        source, _, scan = _scan(["/** @Override */"])
        assert len(scan.diagnostics) == 1
        diag = scan.diagnostics[0]
        assert diag.kind is FindingKind.SPELLING
        assert diag.message == "Syntax error: 'Override' should be 'override' (case sensitive)"
        assert source.slice(diag.span) == "@Override"

    def test_spelling_fix_replaces_name(self):
        source, _, scan = _scan(["/** @overide */"])
        fix = scan.diagnostics[0].fix
        assert fix.kind is EditKind.REPLACE
        assert source.slice(fix.span) == "overide"
        assert "/** @override */" in fix.apply(source.text)

    def test_only_first_match_is_spell_checked(self):
        _, _, scan = _scan(["/** @Override @Overrides */"])
        kinds = [d.kind for d in scan.diagnostics]
        assert kinds == [FindingKind.SPELLING, FindingKind.DUPLICATE]


class TestDuplicates:

    def test_duplicate_in_same_comment_deletes_tag(self):
        source, _, scan = _scan(["/** @override @override */"])
        assert len(scan.diagnostics) == 1
        diag = scan.diagnostics[0]
        assert diag.kind is FindingKind.DUPLICATE
        assert diag.message == "@override jsdoc tag already specified"
        assert source.slice(diag.span) == "override"
        assert source.slice(diag.fix.span) == "@override"
        assert diag.span.start > scan.found.span.start

    def test_duplicate_sole_tag_deletes_comment(self):
        source, member, scan = _scan(["/** @override */", "/** @override */"])
        diag = scan.diagnostics[0]
        assert diag.fix.kind is EditKind.DELETE
        assert source.slice(diag.fix.span) == "/** @override */ "
        assert "  /** @override */ m() {}" in diag.fix.apply(source.text)

    def test_every_duplicate_reported_in_order(self):
        _, _, scan = _scan(["/** @override */", "/** @overrides */", "/** @OVERRIDE */"])
        assert [d.kind for d in scan.diagnostics] == [FindingKind.DUPLICATE] * 2
        starts = [d.span.start for d in scan.diagnostics]
        assert starts == sorted(starts)

    def test_duplicate_keeps_description_of_comment(self):
        described = "/**\n * Renders the widget; callers must hold the lock.\n * @override\n */"
        source, _, scan = _scan(["/** @override */", described])
        diag = scan.diagnostics[0]
        assert source.slice(diag.fix.span) == "@override"
        fixed = diag.fix.apply(source.text)
        assert "callers must hold the lock" in fixed
        assert fixed.count("@override") == 1

    def test_duplicate_in_multiline_bare_comment_deletes_comment(self):
        source, _, scan = _scan(["/** @override */", "/**\n * @override\n */"])
        diag = scan.diagnostics[0]
        assert source.slice(diag.fix.span) == "/**\n * @override\n */ "

    def test_duplicate_keeps_other_tags_of_comment(self):
        source, _, scan = _scan(["/** @override */", "/** @deprecated @override */"])
        fixed = scan.diagnostics[0].fix.apply(source.text)
        assert "/** @deprecated  */" in fixed
