"""Tests for TransitiveDependencyGraph and WorkspaceData."""

from deployfind import RuleKind, TransitiveDependencyGraph, WorkspaceData

from fakes import binary, consumer, key, library


def _graph(**edges):
    return TransitiveDependencyGraph(
        {key(src): [key(d) for d in dsts] for src, dsts in edges.items()}
    )


class TestReachableSubset:
    def test_direct_and_transitive(self):
        g = _graph(app=["lib"], lib=["base"])
        assert g.reachable_subset(key("app"), {key("lib"), key("base")}) == {key("lib"), key("base")}

    def test_only_candidates_reported(self):
        g = _graph(app=["lib"], lib=["base"])
        assert g.reachable_subset(key("app"), {key("base")}) == {key("base")}

    def test_unreachable(self):
        g = _graph(app=["lib"], other=["base"])
        assert g.reachable_subset(key("app"), {key("base")}) == frozenset()

    def test_source_not_reachable_from_itself(self):
        g = _graph(app=["lib"])
        assert g.reachable_subset(key("app"), {key("app")}) == frozenset()

    def test_cycle_terminates(self):
        g = _graph(a=["b"], b=["a"])
        assert g.reachable_subset(key("a"), {key("a")}) == {key("a")}

    def test_empty_candidates(self):
        assert _graph(a=["b"]).reachable_subset(key("a"), set()) == frozenset()

    def test_unknown_source(self):
        assert _graph().reachable_subset(key("nope"), {key("a")}) == frozenset()


class TestWorkspaceData:
    def test_metadata(self):
        data = WorkspaceData([binary("//app:app"), library("//lib:lib")])
        assert data.kind_of(key("//app:app")) is RuleKind.BINARY
        assert data.kind_of(key("//lib:lib")) is RuleKind.LIBRARY
        assert data.kind_of(key("//missing")) is RuleKind.UNKNOWN
        assert data.archive_location_of(key("//app:app")).relative_path == "app/app_deploy.jar"
        assert data.archive_location_of(key("//lib:lib")) is None

    def test_binary_targets_in_declaration_order(self):
        data = WorkspaceData([binary("//b:b"), library("//l:l"), binary("//a:a")])
        assert [t.key for t in data.binary_targets()] == [key("//b:b"), key("//a:a")]

    def test_binary_targets_follow_kind_of(self):
        class Reclassified(WorkspaceData):
            def kind_of(self, key):
                return RuleKind.BINARY if key.label == "//l:l" else super().kind_of(key)

        data = Reclassified([binary("//b:b"), library("//l:l")])
        assert [t.key for t in data.binary_targets()] == [key("//b:b"), key("//l:l")]

    def test_consumer_lookup(self):
        res = consumer("res", "//lib:lib")
        data = WorkspaceData([], [res])
        assert data.consumer("res") is res
        assert data.consumer("other") is None

    def test_default_oracle_is_empty_graph(self):
        data = WorkspaceData()
        assert data.oracle.reachable_subset(key("a"), {key("b")}) == frozenset()
