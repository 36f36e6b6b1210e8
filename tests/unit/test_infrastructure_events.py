"""Unit tests for the event bus, topic forwarding and email delivery.

Tests cover:
- InMemoryEventBus: subscribe/publish, base-class subscriptions, no-op
  without handlers, handler failure isolation (fail-open)
- TopicForwarder: topic, key (user id, else event id), payload shape
- LoggingEventPublisher: structured log entry
- deliver_email: success, logged failure
- StubEmailService: rendered links and outbox

Architecture:
- Unit tests with mocked logger
- Events never carry token values or passwords
"""

from unittest.mock import AsyncMock, Mock

import pytest
from uuid_extensions import uuid7

from dsagrind.application.services import deliver_email
from dsagrind.domain.events import (
    DomainEvent,
    PasswordChanged,
    RefreshTokenRevoked,
    UserRegistered,
)
from dsagrind.infrastructure.email import StubEmailService
from dsagrind.infrastructure.events import (
    InMemoryEventBus,
    LoggingEventPublisher,
    TopicForwarder,
)


def registered_event() -> UserRegistered:
    return UserRegistered(user_id=uuid7(), username="bob", email="bob@x.com")


@pytest.mark.unit
class TestInMemoryEventBus:
    @pytest.mark.asyncio
    async def test_handler_receives_published_event(self, logger):
        bus = InMemoryEventBus(logger=logger)
        handler = AsyncMock()
        bus.subscribe(UserRegistered, handler)
        event = registered_event()

        await bus.publish(event)

        handler.assert_awaited_once_with(event)

    @pytest.mark.asyncio
    async def test_base_class_subscription_receives_every_event(self, logger):
        bus = InMemoryEventBus(logger=logger)
        handler = AsyncMock()
        bus.subscribe(DomainEvent, handler)

        await bus.publish(registered_event())
        await bus.publish(PasswordChanged(user_id=uuid7()))

        assert handler.await_count == 2

    @pytest.mark.asyncio
    async def test_other_event_types_not_delivered(self, logger):
        bus = InMemoryEventBus(logger=logger)
        handler = AsyncMock()
        bus.subscribe(PasswordChanged, handler)

        await bus.publish(registered_event())

        handler.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, logger):
        # Arrange
        bus = InMemoryEventBus(logger=logger)
        failing = AsyncMock(side_effect=RuntimeError("broker down"))
        healthy = AsyncMock()
        bus.subscribe(UserRegistered, failing)
        bus.subscribe(UserRegistered, healthy)

        # Act
        await bus.publish(registered_event())

        # Assert
        healthy.assert_awaited_once()
        logger.warning.assert_called_once()
        assert logger.warning.call_args[0][0] == "event_handler_failed"
        assert logger.warning.call_args[1]["error_message"] == "broker down"


@pytest.mark.unit
class TestTopicForwarder:
    @pytest.mark.asyncio
    async def test_forwards_payload_keyed_by_user_id(self):
        publisher = AsyncMock()
        forwarder = TopicForwarder(publisher=publisher, topic="user-events")
        event = registered_event()

        await forwarder(event)

        topic, key, payload = publisher.publish.call_args[0]
        assert topic == "user-events"
        assert key == str(event.user_id)
        assert payload["event_type"] == "UserRegistered"
        assert payload["event_id"] == str(event.event_id)
        assert payload["email"] == "bob@x.com"
        assert payload["registration_method"] == "password"

    @pytest.mark.asyncio
    async def test_payload_has_no_token_values(self):
        publisher = AsyncMock()
        forwarder = TopicForwarder(publisher=publisher, topic="user-events")

        await forwarder(
            RefreshTokenRevoked(user_id=uuid7(), ip_address="203.0.113.7", rotated=True)
        )

        payload = publisher.publish.call_args[0][2]
        assert "token" not in payload
        assert payload["rotated"] is True

    @pytest.mark.asyncio
    async def test_logging_publisher_writes_event_entry(self, logger):
        publisher = LoggingEventPublisher(logger=logger)

        await publisher.publish("user-events", "k", {"event_type": "X"})

        logger.info.assert_called_once_with(
            "event_published", topic="user-events", key="k", payload={"event_type": "X"}
        )


@pytest.mark.unit
class TestEmailDelivery:
    @pytest.mark.asyncio
    async def test_successful_send(self, logger):
        send = AsyncMock()

        delivered = await deliver_email(send(), logger=logger, email_type="welcome")

        assert delivered is True
        logger.error.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_send_is_logged_not_raised(self, logger):
        send = AsyncMock(side_effect=ConnectionError("smtp unreachable"))

        delivered = await deliver_email(
            send(), logger=logger, email_type="password_reset", user_id="u1"
        )

        assert delivered is False
        logger.error.assert_called_once()
        assert logger.error.call_args[1]["email_type"] == "password_reset"
        assert isinstance(logger.error.call_args[1]["error"], ConnectionError)

    @pytest.mark.asyncio
    async def test_stub_service_renders_frontend_links(self):
        service = StubEmailService(
            logger=Mock(), frontend_url="https://app.example.com/", reset_expire_hours=1
        )

        await service.send_email_verification("bob@x.com", "bob", "tok+en")
        await service.send_password_reset("bob@x.com", "bob", "reset1")
        await service.send_welcome_email("bob@x.com", "bob")

        verification, reset, welcome = service.outbox
        assert verification.link == "https://app.example.com/verify-email?token=tok%2Ben"
        assert reset.link == "https://app.example.com/reset-password?token=reset1"
        assert "1 hour(s)" in reset.body
        assert welcome.link is None
        assert welcome.subject == "Welcome to DSAGrind"
