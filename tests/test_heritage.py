# tests/test_heritage.py
"""
Tests for heritage lookup: clause and reference order, first hit wins,
and degradation on unresolvable references.
"""

from override_jsdoc.heritage import ResolvedType, TypeOracle, find_base_declaring
from tests.conftest import FakeOracle, SourceBuilder


class TestResolvedType:

    def test_members_and_declares(self):
        rt = ResolvedType("Base", frozenset({"a", "b"}))
        assert rt.members() == frozenset({"a", "b"})
        assert rt.declares("a")
        assert not rt.declares("c")

    def test_fake_oracle_satisfies_protocol(self):
        assert isinstance(FakeOracle(), TypeOracle)


class TestFindBaseDeclaring:

    def test_no_heritage_never_queries(self):
        cls = SourceBuilder().cls("Plain")
        oracle = FakeOracle({"Base": ["m"]})
        assert find_base_declaring(cls, "m", oracle) is None
        assert oracle.calls == []

    def test_empty_clause_list(self):
        cls = SourceBuilder().cls("Derived", extends=[])
        assert find_base_declaring(cls, "m", FakeOracle()) is None

    def test_extends_hit(self):
        cls = SourceBuilder().cls("Derived", extends=["Base"])
        found = find_base_declaring(cls, "m", FakeOracle({"Base": ["m"]}))
        assert found is not None
        assert found.name == "Base"

    def test_miss(self):
        cls = SourceBuilder().cls("Derived", extends=["Base"])
        assert find_base_declaring(cls, "other", FakeOracle({"Base": ["m"]})) is None

    def test_implements_counts(self):
        cls = SourceBuilder().cls("Derived", implements=["IFace"])
        found = find_base_declaring(cls, "m", FakeOracle({"IFace": ["m"]}))
        assert found.name == "IFace"

    def test_first_hit_wins_and_stops(self):
        cls = SourceBuilder().cls("Derived", extends=["Base"], implements=["I1", "I2"])
        oracle = FakeOracle({"Base": ["x"], "I1": ["m"], "I2": ["m"]})
        found = find_base_declaring(cls, "m", oracle)
        assert found.name == "I1"
        assert oracle.calls == ["Base", "I1"]

    def test_unresolvable_none_is_skipped(self):
        cls = SourceBuilder().cls("Derived", extends=["Unknown"], implements=["IFace"])
        oracle = FakeOracle({"IFace": ["m"]})
        assert find_base_declaring(cls, "m", oracle).name == "IFace"
        assert oracle.calls == ["Unknown", "IFace"]

    def test_unresolvable_raise_is_skipped(self):
        cls = SourceBuilder().cls("Derived", extends=["Broken"], implements=["IFace"])
        oracle = FakeOracle({"IFace": ["m"]}, raising=["Broken"])
        assert find_base_declaring(cls, "m", oracle).name == "IFace"

    def test_all_unresolvable(self):
        cls = SourceBuilder().cls("Derived", extends=["A"], implements=["B"])
        oracle = FakeOracle(raising=["A"])
        assert find_base_declaring(cls, "m", oracle) is None
