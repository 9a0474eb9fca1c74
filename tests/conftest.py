"""Shared pytest fixtures."""

import pytest

from calendar_context import scripts
from calendar_context.shell import ShellResult

NOT_CONFIGURED = ShellResult(exit_code=1, stderr="not configured")


class FakeRunner:
    """Stands in for PowerShell, answering by which script it is given.

    Each response is a ShellResult, an exception to raise, or a list of
    those consumed one call at a time.
    """

    def __init__(self, outlook=None, winrt=None, outlook_probe=None, winrt_probe=None):
        self.responses = {
            "outlook": outlook,
            "winrt": winrt,
            "outlook_probe": outlook_probe,
            "winrt_probe": winrt_probe,
        }
        self.calls: list[str] = []
        self.scripts: list[str] = []

    @staticmethod
    def classify(script: str) -> str:
        if script == scripts.OUTLOOK_PROBE_SCRIPT:
            return "outlook_probe"
        if script == scripts.WINDOWS_RUNTIME_PROBE_SCRIPT:
            return "winrt_probe"
        if "Outlook.Application" in script:
            return "outlook"
        return "winrt"

    async def __call__(self, script: str) -> ShellResult:
        kind = self.classify(script)
        self.calls.append(kind)
        self.scripts.append(script)

        response = self.responses[kind]
        if isinstance(response, list):
            response = response.pop(0) if response else None
        if response is None:
            return NOT_CONFIGURED
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def anyio_backend():
    """Run anyio-marked tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner
