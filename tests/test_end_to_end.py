# tests/test_end_to_end.py
"""
End-to-end tests: TypeScript text → front-end → declaration index →
rule → fixes → re-analysis.
"""

import pytest

from override_jsdoc.diagnostics import EditKind, FindingKind
from override_jsdoc.fixes import apply_fixes
from override_jsdoc.tags import scan_override_tags
from override_jsdoc.walker import iter_class_members
from tests.conftest import analyse, make_context

BASE = "class Base {\n  m() {}\n  static s() {}\n}\n"


def _fix_and_recheck(text, **kwargs):
    source, diags = analyse(text, **kwargs)
    result = apply_fixes(source.text, diags)
    _, after = analyse(result.text, **kwargs)
    return diags, result, after


class TestScenarios:

    def test_a_missing_tag(self):
        text = BASE + "class Derived extends Base {\n  m() {}\n}\n"
        source, diags = analyse(text)
        assert len(diags) == 1
        diag = diags[0]
        assert diag.kind is FindingKind.MISSING
        assert diag.location.line == 6
        assert source.slice(diag.span) == "m"
        fixed = apply_fixes(text, diags).text
        assert "class Derived extends Base {\n  /** @override */ m() {}\n}" in fixed
        assert analyse(fixed)[1] == []

    def test_b_no_base(self):
        text = BASE + "class Derived extends Base {\n  /** @override */ other() {}\n}\n"
        diags, result, after = _fix_and_recheck(text)
        assert [d.kind for d in diags] == [FindingKind.NO_BASE]
        assert diags[0].fix.kind is EditKind.DELETE
        assert "@override" not in result.text
        assert after == []

    def test_c_spelling(self):
        text = BASE + "class Derived extends Base {\n  /** @Override */ m() {}\n}\n"
        diags, result, after = _fix_and_recheck(text)
        assert [d.kind for d in diags] == [FindingKind.SPELLING]
        assert "'Override' should be 'override'" in diags[0].message
        assert "/** @override */ m()" in result.text
        assert after == []

    @pytest.mark.parametrize("base", [BASE, "class Base {}\n"])
    def test_d_static(self, base):
        text = base + "class Derived extends Base {\n  /** @override */ static s() {}\n}\n"
        diags, _, after = _fix_and_recheck(text)
        assert [d.message for d in diags] == [
            "Extraneous override tag: static members cannot override",
        ]
        assert after == []

    def test_e_duplicate(self):
        text = BASE + "class Derived extends Base {\n  /** @override */ /** @override */ m() {}\n}\n"
        diags, result, after = _fix_and_recheck(text)
        assert [d.kind for d in diags] == [FindingKind.DUPLICATE]
        assert "  /** @override */ m() {}" in result.text
        assert after == []

    def test_duplicate_fix_keeps_description(self):
        text = BASE + (
            "class Derived extends Base {\n"
            "  /** @override */\n"
            "  /**\n"
            "   * Renders the widget; callers must hold the lock.\n"
            "   * @override\n"
            "   */\n"
            "  m() {}\n"
            "}\n"
        )
        diags, result, after = _fix_and_recheck(text)
        assert [d.kind for d in diags] == [FindingKind.DUPLICATE]
        assert "callers must hold the lock" in result.text
        assert result.text.count("@override") == 1
        assert after == []

    def test_private_names_do_not_override(self):
        text = "class Base { #p() {} }\nclass Derived extends Base { #p() {} }\n"
        assert analyse(text)[1] == []
        tagged = "class Base { #p() {} }\nclass Derived extends Base { /** @override */ #p() {} }\n"
        assert [d.kind for d in analyse(tagged)[1]] == [FindingKind.NO_BASE]


class TestIdempotence:

    MIXED = (
        "interface Named { name(): string; }\n"
        "class Base implements Named {\n"
        "  constructor(protected readonly id: number) {}\n"
        "  name() { return ''; }\n"
        "  size = 0;\n"
        "  get label() { return ''; }\n"
        "}\n"
        "class Derived extends Base {\n"
        "  /** @Overrides */\n"
        "  constructor() { super(1); }\n"
        "  name() { return 'd'; }\n"
        "  /**\n"
        "   * Current size.\n"
        "   * @overide\n"
        "   * @override\n"
        "   */\n"
        "  size = 1;\n"
        "  /** @override */ get label() { return 'x'; }\n"
        "  /** @override */ id2 = 3;\n"
        "  /** @override */ static make() { return new Derived(); }\n"
        "  /** @override */ [key: string]: any;\n"
        "  /** @Override */ [Symbol.iterator]() {}\n"
        "}\n"
        "const o = { /** @OVERRIDE */ name() { return ''; } };\n"
    )

    def test_all_fixes_then_clean(self):
        diags, result, after = _fix_and_recheck(self.MIXED)
        kinds = {d.kind for d in diags}
        assert kinds == set(FindingKind)
        assert result.skipped == []
        assert after == []

    def test_fix_is_stable(self):
        _, result, _ = _fix_and_recheck(self.MIXED)
        assert apply_fixes(result.text, analyse(result.text)[1]).text == result.text

    def test_missing_on_decorated_member(self):
        text = BASE + "class Derived extends Base {\n  @trace()\n  m() {}\n}\n"
        diags, result, after = _fix_and_recheck(text)
        assert [d.kind for d in diags] == [FindingKind.MISSING]
        assert "/** @override */ @trace()" in result.text
        assert after == []

    def test_stub_base(self):
        text = "class View extends React.Component {\n  render() {}\n}\n"
        stubs = {"Component": {"members": ["render"]}}
        diags, _, after = _fix_and_recheck(text, stubs=stubs)
        assert [d.kind for d in diags] == [FindingKind.MISSING]
        assert after == []


class TestRoundTrip:

    @pytest.mark.parametrize("member", [
        "m() {}",
        "/** Does things. */ m() {}",
        "get m() { return 1; }",
        "m = 1;",
    ])
    def test_inserted_tag_scans_clean(self, member):
        text = BASE + f"class Derived extends Base {{\n  {member}\n}}\n"
        source, diags = analyse(text)
        fixed = apply_fixes(text, diags).text
        fixed_source, after = analyse(fixed)
        assert after == []
        derived = [m for m in iter_class_members(fixed_source.root)
                   if m.parent.name == "Derived"]
        (target,) = derived
        scan = scan_override_tags(target.docs, make_context(fixed_source))
        assert scan.found is not None and scan.found.name == "override"
        assert scan.diagnostics == ()
