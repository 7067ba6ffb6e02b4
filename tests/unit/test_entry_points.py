"""Unit tests for entry point discovery and topology selection."""

import itertools

import pytest

from jsbuild.entry_points import EntryPointSet, select_topology
from jsbuild.models import Topology

FLAGS = ("browser_js", "browser_ts", "module_js", "module_ts", "src_js", "src_ts")


def _all_snapshots():
    for values in itertools.product((False, True), repeat=len(FLAGS)):
        yield EntryPointSet("", **dict(zip(FLAGS, values)))


class TestDiscover:
    """EntryPointSet.discover()"""

    def test_empty_directory(self, tmp_path):
        snapshot = EntryPointSet.discover(f"{tmp_path}/")
        assert not any(getattr(snapshot, flag) for flag in FLAGS)
        assert snapshot.tsconfig is False

    def test_detects_files(self, package_dir):
        cwd = package_dir("builds/browser.ts", "builds/module.ts", "src/index.js", "tsconfig.json")
        snapshot = EntryPointSet.discover(cwd)
        assert snapshot.browser_ts and snapshot.module_ts and snapshot.src_js and snapshot.tsconfig
        assert not snapshot.browser_js and not snapshot.module_js and not snapshot.src_ts

    def test_snapshot_is_not_refreshed(self, package_dir, tmp_path):
        cwd = package_dir()
        snapshot = EntryPointSet.discover(cwd)
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "index.js").write_text("")
        assert snapshot.src_js is False

    def test_relative_to_process_directory(self, tmp_path, monkeypatch):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "index.ts").write_text("")
        monkeypatch.chdir(tmp_path)
        assert EntryPointSet.discover("").src_ts is True


class TestModuleEntryPoint:
    """Module entry priority: module JS, module TS, src JS, src TS."""

    @pytest.mark.parametrize(
        "flags, expected",
        [
            ({"module_js": True, "module_ts": True, "src_js": True, "src_ts": True}, "pkg/builds/module.js"),
            ({"module_ts": True, "src_js": True, "src_ts": True}, "pkg/builds/module.ts"),
            ({"src_js": True, "src_ts": True}, "pkg/src/index.js"),
            ({"src_ts": True}, "pkg/src/index.ts"),
            ({}, None),
        ],
    )
    def test_priority(self, flags, expected):
        snapshot = EntryPointSet("pkg/", **flags)
        assert snapshot.module_entry_point() == expected
        assert snapshot.module_entry_points() == ([expected] if expected else [])

    def test_browser_prefers_javascript(self):
        assert EntryPointSet("", browser_js=True, browser_ts=True).browser_entry_point() == "builds/browser.js"
        assert EntryPointSet("", browser_ts=True).browser_entry_point() == "builds/browser.ts"


class TestSelectTopology:
    """select_topology()"""

    def test_front_end_javascript(self):
        assert select_topology(EntryPointSet("", browser_js=True, module_js=True)) is Topology.FRONT_END

    def test_front_end_typescript(self):
        assert select_topology(EntryPointSet("", browser_ts=True, module_ts=True)) is Topology.FRONT_END

    @pytest.mark.parametrize(
        "flags",
        [
            {"browser_js": True, "module_ts": True},
            {"browser_ts": True, "module_js": True},
        ],
    )
    def test_mismatched_kinds_are_not_front_end(self, flags):
        assert select_topology(EntryPointSet("", **flags)) is Topology.UNRESOLVED
        assert select_topology(EntryPointSet("", src_ts=True, **flags)) is Topology.BACK_END

    def test_back_end(self):
        assert select_topology(EntryPointSet("", src_js=True)) is Topology.BACK_END
        assert select_topology(EntryPointSet("", src_ts=True)) is Topology.BACK_END

    def test_tsconfig_alone_is_unresolved(self):
        assert select_topology(EntryPointSet("", tsconfig=True)) is Topology.UNRESOLVED

    def test_every_combination_has_one_outcome(self):
        for snapshot in _all_snapshots():
            topology = select_topology(snapshot)
            assert topology in Topology
            if topology is Topology.FRONT_END:
                assert (snapshot.browser_js and snapshot.module_js) or (snapshot.browser_ts and snapshot.module_ts)
            elif topology is Topology.BACK_END:
                assert snapshot.src_js or snapshot.src_ts
            else:
                assert not (snapshot.src_js or snapshot.src_ts)
