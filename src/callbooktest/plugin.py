from collections.abc import Generator
from typing import Any

import pytest

from callbook import CallsRegistry, MocksRegistry, StrictCallsRegistry


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("callbook")
    group.addoption(
        "--calls-no-context",
        action="store_true",
        default=False,
        help="Leave per-invocation stack traces out of unverified-call reports.",
    )
    group.addoption(
        "--calls-verify-teardown",
        action="store_true",
        default=False,
        help="Fail tests that leave registered calls unverified.",
    )


def _include_context(request: pytest.FixtureRequest) -> bool:
    return not request.config.getoption("--calls-no-context", default=False)


@pytest.fixture
def mocks_registry(
    request: pytest.FixtureRequest,
) -> Generator[MocksRegistry, None, None]:
    """Every call registry of the test, swept for leftovers at teardown.

    Usage:

        def test_checkout(mocks_registry, default_calls):
            gateway = FakeGateway(default_calls)
            Shop(gateway).checkout("alice")
            assert default_calls.verify_and_remove_call(1, "charge", "alice", 10)
    """
    registry = MocksRegistry(include_context=_include_context(request))

    yield registry

    # Print leftovers on test failure
    if hasattr(request.node, "rep_call") and request.node.rep_call.failed:
        print("\n--- callbook unverified calls ---")
        print(registry.summary())
    elif request.config.getoption("--calls-verify-teardown", default=False):
        if not registry.verify_no_more_invocations_anywhere():
            pytest.fail(
                f"Test left unverified invocations:\n{registry.summary()}",
                pytrace=False,
            )


@pytest.fixture
def default_calls(
    request: pytest.FixtureRequest, mocks_registry: MocksRegistry
) -> CallsRegistry[Any]:
    calls: CallsRegistry[Any] = CallsRegistry(include_context=_include_context(request))
    mocks_registry.register_mock(calls)
    return calls


@pytest.fixture
def strict_calls(
    request: pytest.FixtureRequest, mocks_registry: MocksRegistry
) -> StrictCallsRegistry[Any]:
    calls: StrictCallsRegistry[Any] = StrictCallsRegistry(
        include_context=_include_context(request)
    )
    mocks_registry.register_mock(calls)
    return calls


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item,
    call: pytest.CallInfo,  # noqa: ARG001
) -> Generator[None, None, None]:
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)
