"""
Shared pytest fixtures for the understudy test suite.

Fixtures follow the Arrange-Act-Assert (AAA) pattern and ensure test
isolation by providing a fresh fake for each test: a mock is test-scoped
and must never be shared between test cases.

Key Concepts Demonstrated:
- Function-scoped fixtures for test doubles
- Fixture dependencies (loggers built on top of mock fixtures)
- Test data generation with Faker
"""

from __future__ import annotations

import logging
from email.message import EmailMessage

import pytest
from faker import Faker

from samples import ILoggerDependency, ILogMailer, ILogWriter, Logger, SmartLogger
from understudy import Mock, MockBehavior, MockRepository
from understudy.config import get_config

# Configure logging for the test run
logging.basicConfig(
    level=get_config().LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


# Initialize Faker for generating test data
fake = Faker()


# -----------------------------------------------------------------------------
# Test Data Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def log_message() -> str:
    """
    Provide a random log line.

    Returns:
        A short sentence generated by Faker.
    """
    return fake.sentence(nb_words=6)


@pytest.fixture
def mail_message() -> EmailMessage:
    """
    Provide an email message like the one a real mailer would build.

    Returns:
        EmailMessage with random sender and recipient addresses.
    """
    message = EmailMessage()
    message["From"] = fake.email()
    message["To"] = fake.email()
    message.set_content(fake.paragraph())
    return message


# -----------------------------------------------------------------------------
# Test Double Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def log_writer_mock() -> Mock:
    """
    Create a loose mock of ILogWriter.

    Returns:
        Mock whose ``object`` can be injected into a logger.
    """
    return Mock(ILogWriter, MockBehavior.LOOSE)


@pytest.fixture
def strict_log_writer_mock() -> Mock:
    """Create a strict mock of ILogWriter that rejects unconfigured calls."""
    return Mock(ILogWriter, MockBehavior.STRICT)


@pytest.fixture
def log_mailer_mock() -> Mock:
    """Create a loose mock of ILogMailer."""
    return Mock(ILogMailer, MockBehavior.LOOSE)


@pytest.fixture
def logger_dependency_mock() -> Mock:
    """Create a loose mock of ILoggerDependency."""
    return Mock(ILoggerDependency, MockBehavior.LOOSE)


@pytest.fixture
def repository() -> MockRepository:
    """Create an empty mock repository with loose behavior."""
    return MockRepository(MockBehavior.LOOSE)


# -----------------------------------------------------------------------------
# System Under Test Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def logger(log_writer_mock) -> Logger:
    """
    Create a Logger wired to the ILogWriter mock.

    Args:
        log_writer_mock: Mock fixture providing the writer.

    Returns:
        Logger instance under test.
    """
    return Logger(log_writer_mock.object)


@pytest.fixture
def smart_logger(log_writer_mock, log_mailer_mock) -> SmartLogger:
    """Create a SmartLogger wired to the writer and mailer mocks."""
    return SmartLogger(log_writer_mock.object, log_mailer_mock.object)
