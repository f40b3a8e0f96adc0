"""
Verification of recorded calls.

The verifier only reads the invocation log and the expectation store. The
one state change it causes is moving the proxy to VERIFIED on its first use.
"""

from __future__ import annotations

import logging

from understudy.errors import VerificationError
from understudy.matchers import ArgumentsMatcher
from understudy.proxy import Invocation, ProxyDispatcher
from understudy.signatures import MethodSignature
from understudy.times import Times

logger = logging.getLogger(__name__)


def _performed(invocations: tuple[Invocation, ...]) -> str:
    if not invocations:
        return "No invocations performed."
    lines = "\n".join(f"   {invocation}" for invocation in invocations)
    return f"Performed invocations:\n{lines}"


class Verifier:
    """
    Asserts call counts for one proxy.

    Args:
        dispatcher: Dispatcher whose log and store are inspected.
    """

    def __init__(self, dispatcher: ProxyDispatcher):
        self._dispatcher = dispatcher
        # Invocation sequence numbers accounted for by a passing verification
        self._confirmed: set[int] = set()

    def verify(
        self,
        signature: MethodSignature,
        matcher: ArgumentsMatcher,
        times: Times | None = None,
    ) -> int:
        """
        Check how often calls matching ``matcher`` were made to ``signature``.

        Args:
            signature: Member to inspect.
            matcher: Argument matcher selecting the calls to count.
            times: Accepted count range; defaults to at least once.

        Returns:
            The number of matching calls.

        Raises:
            VerificationError: If the count is outside ``times``.
        """
        times = times or Times.at_least_once()
        self._dispatcher.mark_verified()
        invocations = self._dispatcher.invocations
        matching = [
            i for i in invocations if i.signature == signature and matcher.matches(i.arguments)
        ]
        expected_call = signature.describe(matcher.describe())

        if not times.verify(len(matching)):
            logger.warning(f"Verification failed for {expected_call}: {len(matching)} calls")
            raise VerificationError(
                f"Expected invocation on the mock {times}, but was "
                f"{len(matching)} times: {expected_call}\n\n{_performed(invocations)}"
            )

        self._confirmed.update(i.sequence for i in matching)
        logger.info(f"Verified {expected_call} ({len(matching)} calls, expected {times})")
        return len(matching)

    def verify_all(self) -> None:
        """
        Check every expectation that was registered with an expected count.

        All failures are collected and reported in one error.

        Raises:
            VerificationError: If any constrained expectation is unsatisfied.
        """
        self._dispatcher.mark_verified()
        constrained = [e for e in self._dispatcher.store.expectations() if e.expected is not None]
        failures = [
            f"{e.describe()}: expected {e.expected}, but was {e.call_count} times"
            for e in constrained
            if not e.expected.verify(e.call_count)
        ]

        if failures:
            name = self._dispatcher.interface.__name__
            logger.warning(f"{len(failures)} unverified expectations on {name} mock")
            details = "\n".join(f"   {line}" for line in failures)
            raise VerificationError(
                f"The following setups on the {name} mock were not matched:\n{details}\n\n"
                f"{_performed(self._dispatcher.invocations)}"
            )

        answered = {e.sequence for e in constrained}
        self._confirmed.update(
            i.sequence for i in self._dispatcher.invocations if i.matched in answered
        )
        logger.info(f"Verified {len(constrained)} expectations on {self._dispatcher.interface.__name__} mock")

    def verify_no_other_calls(self) -> None:
        """
        Fail if any call was not accounted for by an earlier verification.

        Raises:
            VerificationError: Listing the unverified calls.
        """
        self._dispatcher.mark_verified()
        leftover = [i for i in self._dispatcher.invocations if i.sequence not in self._confirmed]
        if leftover:
            logger.warning(f"{len(leftover)} unverified invocations")
            raise VerificationError(
                "The following invocations were not verified:\n"
                + "\n".join(f"   {i}" for i in leftover)
            )
