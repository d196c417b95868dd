"""Global pytest configuration."""

from __future__ import annotations

import asyncio
import inspect

import pytest

_ENV_VARS = (
    "SAFESHIELD_GATEWAY_URL",
    "HYPERNATIVE_API_BASE_URL",
    "SAFESHIELD_REQUEST_TIMEOUT",
    "HYPERNATIVE_DEBOUNCE_MS",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep a developer's .env and config/ out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HYPERNATIVE_AUTH_TOKEN", "")
    monkeypatch.setenv("SAFESHIELD_CONFIG_DIR", str(tmp_path))


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):  # type: ignore[override]
    """Run `async def` tests on a fresh event loop."""
    if not inspect.iscoroutinefunction(pyfuncitem.obj):
        return None

    testargs = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        loop.run_until_complete(pyfuncitem.obj(**testargs))
        # Let cancelled or finished tracker tasks settle before closing
        pending = [task for task in asyncio.all_tasks(loop) if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
    finally:
        asyncio.set_event_loop(None)
        loop.close()
    return True


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "asyncio: mark test as requiring asyncio support")
