"""Tests for FinderSession: end-to-end resolution, reconciliation, finder selection."""

from deployfind import (
    ArtifactLocationDecoder,
    DeployJarClassFinder,
    FinderSession,
    OutputDirectoryClassFinder,
    Settings,
    SyncCounter,
)
from deployfind.fallback import FALLBACK_FINDER_KEY

from fakes import FakeDecoder, FakeReader, binary, consumer, jar_path, key, library, workspace, write_jar

APP1, APP2, LIB = "//app:app1", "//app:app2", "//lib:lib"


class TestEndToEnd:
    def test_resolves_from_dependent_binary(self, tmp_path):
        app1_jar = write_jar(tmp_path / jar_path(APP1), "com.x.Foo")
        write_jar(tmp_path / jar_path(APP2), "com.y.Bar")
        res = consumer("lib", LIB)
        session = FinderSession(settings=Settings(), decoder=ArtifactLocationDecoder(tmp_path))
        session.on_sync_completed(
            workspace([binary(APP1), binary(APP2), library(LIB)], {APP1: [LIB]}, [res])
        )

        handle = session.resolve_class(res, "com.x.Foo")
        assert handle.container == app1_jar
        assert handle.entry == "com/x/Foo.class"
        assert session.registry.owner_of("com.x.Foo") == key(APP1)
        assert session.finder_for(res).candidate_binaries() == (key(APP1),)

    def test_falls_back_to_compiled_output(self, tmp_path):
        write_jar(tmp_path / jar_path(APP1))
        classes = tmp_path / "classes" / "com" / "x"
        classes.mkdir(parents=True)
        (classes / "Foo.class").write_bytes(b"\xca\xfe")
        res = consumer("lib", LIB)
        session = FinderSession(
            settings=Settings(),
            decoder=ArtifactLocationDecoder(tmp_path),
            fallback_factory=lambda c: OutputDirectoryClassFinder([tmp_path / "classes"]),
        )
        session.on_sync_completed(workspace([binary(APP1), library(LIB)], {APP1: [LIB]}, [res]))

        handle = session.resolve_class(res, "com.x.Foo")
        assert handle.in_archive is False
        assert session.registry.owner_of("com.x.Foo") is None

    def test_not_found_is_none(self, tmp_path):
        write_jar(tmp_path / jar_path(APP1))
        res = consumer("lib", LIB)
        session = FinderSession(settings=Settings(), decoder=ArtifactLocationDecoder(tmp_path))
        session.on_sync_completed(workspace([binary(APP1), library(LIB)], {APP1: [LIB]}, [res]))
        assert session.resolve_class(res, "com.x.Nothing") is None

    def test_output_base_from_settings(self, tmp_path):
        app1_jar = write_jar(tmp_path / jar_path(APP1), "com.x.Foo")
        res = consumer("lib", LIB)
        session = FinderSession(settings=Settings(output_base=str(tmp_path)))
        session.on_sync_completed(workspace([binary(APP1), library(LIB)], {APP1: [LIB]}, [res]))
        assert session.resolve_class(res, "com.x.Foo").container == app1_jar


class TestSessionLifecycle:
    def test_generation_advances_per_sync(self):
        session = FinderSession(settings=Settings())
        assert session.snapshot() == (0, None)
        data = workspace([], {}, [])
        session.on_sync_completed(data)
        session.on_sync_completed()
        assert session.snapshot() == (2, data)

    def test_shared_counter(self):
        counter = SyncCounter()
        session = FinderSession(counter=counter, settings=Settings())
        session.on_sync_completed()
        assert counter.current_generation() == 1

    def test_finder_per_consumer_name(self):
        session = FinderSession(settings=Settings())
        a = session.finder_for(consumer("a", LIB))
        assert session.finder_for(consumer("a", LIB)) is a
        assert session.finder_for(consumer("b", LIB)) is not a
        assert isinstance(a, DeployJarClassFinder)

    def test_disabled_finder_uses_fallback_directly(self):
        fallback = OutputDirectoryClassFinder()
        session = FinderSession(
            settings=Settings(class_finder=FALLBACK_FINDER_KEY),
            fallback_factory=lambda c: fallback,
        )
        assert session.finder_for(consumer("a", LIB)) is fallback

    def test_reconcile_drops_vanished_consumers(self):
        session = FinderSession(settings=Settings(), decoder=FakeDecoder(), reader=FakeReader())
        kept, gone = consumer("kept", LIB), consumer("gone", LIB)
        session.on_sync_completed(workspace([library(LIB)], {}, [kept, gone]))
        kept_finder = session.finder_for(kept)
        gone_finder = session.finder_for(gone)

        session.on_sync_completed(workspace([library(LIB)], {}, [kept]))
        assert session.finder_for(kept) is kept_finder
        assert session.finder_for(gone) is not gone_finder

    def test_replaced_consumer_uses_new_targets(self):
        reader = FakeReader()
        session = FinderSession(settings=Settings(), decoder=FakeDecoder(), reader=reader)
        old = consumer("res", LIB)
        session.on_sync_completed(
            workspace([binary(APP1), binary(APP2), library(LIB), library("//other:o")],
                      {APP1: [LIB], APP2: ["//other:o"]}, [old])
        )
        finder = session.finder_for(old)
        assert finder.candidate_binaries() == (key(APP1),)

        new = consumer("res", "//other:o")
        session.on_sync_completed(
            workspace([binary(APP1), binary(APP2), library(LIB), library("//other:o")],
                      {APP1: [LIB], APP2: ["//other:o"]}, [new])
        )
        assert session.finder_for(new) is finder
        assert finder.candidate_binaries() == (key(APP2),)

    def test_dispose(self):
        session = FinderSession(settings=Settings())
        finder = session.finder_for(consumer("a", LIB))
        session.dispose()
        assert session.finder_for(consumer("a", LIB)) is not finder
