"""
Mock repository.

Creates mocks that share a behavior and default-value policy, and verifies
all of them with a single call. Useful when one system under test has
several collaborators::

    repo = MockRepository(MockBehavior.LOOSE)
    writer = repo.create(ILogWriter)
    mailer = repo.create(ILogMailer)
    ...
    repo.verify_all()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from understudy.defaults import DefaultValue
from understudy.errors import VerificationError
from understudy.expectations import MockBehavior
from understudy.mock import Mock

logger = logging.getLogger(__name__)


class MockQuery:
    """
    Deferred stub construction for ``MockRepository.of``.

    Each ``where`` adds a functional specification; ``first`` builds the
    stub and returns its proxy.
    """

    def __init__(self, repository: MockRepository, interface: type):
        self._repository = repository
        self._interface = interface
        self._specifications: list[Callable[[Any], Any]] = []

    def where(self, specification: Callable[[Any], Any]) -> MockQuery:
        self._specifications.append(specification)
        return self

    def first(self) -> Any:
        mock = self._repository.create(self._interface)
        for specification in self._specifications:
            mock.apply(specification)
        return mock.object


class MockRepository:
    """
    Factory and bulk verifier for mocks.

    Args:
        behavior: Behavior for every mock the repository creates, unless
            overridden per mock.
        default_value: Default-value policy for created mocks.
    """

    def __init__(
        self,
        behavior: MockBehavior | str | None = None,
        default_value: DefaultValue | str | None = None,
    ):
        self.behavior = behavior
        self.default_value = default_value
        self._mocks: list[Mock] = []

    @property
    def mocks(self) -> list[Mock]:
        return list(self._mocks)

    def create(self, interface: type, behavior: MockBehavior | str | None = None) -> Mock:
        """Create a mock owned by this repository."""
        mock = Mock(interface, behavior or self.behavior, self.default_value)
        self._mocks.append(mock)
        return mock

    def of(self, interface: type) -> MockQuery:
        """Start a ``where(...).first()`` stub query."""
        return MockQuery(self, interface)

    def one_of(self, interface: type, specification: Callable[[Any], Any]) -> Any:
        """Build a stub from one functional specification and return its proxy."""
        mock = self.create(interface)
        mock.apply(specification)
        return mock.object

    def verify_all(self) -> None:
        """
        Run ``verify_all`` on every mock and report all failures together.

        Raises:
            VerificationError: If any mock has unsatisfied expectations.
        """
        failures: list[str] = []
        for mock in self._mocks:
            try:
                mock.verify_all()
            except VerificationError as exc:
                failures.append(str(exc))

        if failures:
            logger.warning(f"{len(failures)} of {len(self._mocks)} mocks failed verification")
            raise VerificationError("\n\n".join(failures))
        logger.info(f"Verified {len(self._mocks)} mocks")
