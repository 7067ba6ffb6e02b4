"""Pytest configuration and fixtures for jsbuild tests.

Every test gets its console output redirected to a StringIO so assertions
can inspect what a user would see, and the output module globals are put
back afterwards.
"""

import inspect
import sys
from io import StringIO
from pathlib import Path
from typing import Optional

import pytest

from jsbuild import output
from jsbuild.build.bundler import BundleOptions, RebuildCallback
from jsbuild.errors import BundleError


@pytest.fixture(autouse=True)
def console_output(monkeypatch):
    """Capture jsbuild console output as plain text."""
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("TTY_COMPATIBLE", raising=False)

    original_stream = output._output_stream
    original_verbose = output._verbose

    stream = StringIO()
    output.set_output_stream(stream)
    output.set_verbose(False)

    yield stream

    output.set_output_stream(original_stream)
    output.set_verbose(original_verbose)


@pytest.hookimpl(hookwrapper=True, trylast=True)
def pytest_runtest_teardown(item):  # noqa: ARG001
    """Ensure streams are restored during teardown phase."""
    yield

    if hasattr(sys.stdout, "closed") and sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if hasattr(sys.stderr, "closed") and sys.stderr.closed:
        sys.stderr = sys.__stderr__


class FakeBundler:
    """In-memory bundler recording every build request.

    Outputs are written as small JS files so the size report has something
    to measure. Builds whose output file name is a key of `failures` raise
    BundleError with the mapped errors.
    """

    def __init__(self) -> None:
        self.calls: list[BundleOptions] = []
        self.watchers: dict[str, RebuildCallback] = {}
        self.failures: dict[str, list] = {}
        self.closed = False

    async def build(self, options: BundleOptions) -> None:
        self.calls.append(options)
        name = Path(options.outfile).name
        if options.watch is not None:
            self.watchers[name] = options.watch
        if not options.entry_points:
            return
        if name in self.failures:
            raise BundleError(self.failures[name])
        outfile = Path(options.outfile)
        outfile.parent.mkdir(parents=True, exist_ok=True)
        outfile.write_text("export const value = 42;\n" * 20)

    async def wait_closed(self) -> None:
        return None

    def close(self) -> None:
        self.closed = True

    @property
    def outfiles(self) -> list[str]:
        return [Path(call.outfile).name for call in self.calls]

    async def trigger(self, name: str, error: Optional[BundleError] = None) -> None:
        """Simulate a change-triggered rebuild of the watched bundle `name`."""
        outcome = self.watchers[name](error)
        if inspect.isawaitable(outcome):
            await outcome


class FakeTypeChecker:
    """Type checker returning a fixed exit status."""

    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.calls: list[str] = []

    def __call__(self, cwd: str) -> int:
        self.calls.append(cwd)
        return self.returncode


class RecordingChannel:
    """Parent channel recording sent messages."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def send(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def fake_bundler() -> FakeBundler:
    return FakeBundler()


@pytest.fixture
def fake_type_checker() -> FakeTypeChecker:
    return FakeTypeChecker()


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def package_dir(tmp_path: Path):
    """Factory creating package files under tmp_path.

    Usage:
        cwd = package_dir("src/index.ts", "tsconfig.json")
    """

    def make(*files: str, package_json: Optional[str] = None) -> str:
        for relative in files:
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("export default 1;\n" if relative.endswith((".js", ".ts")) else "{}\n")
        if package_json is not None:
            (tmp_path / "package.json").write_text(package_json)
        return f"{tmp_path}/"

    return make
