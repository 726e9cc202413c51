"""Tests for the per-user notification writer."""

from __future__ import annotations

import logging
import threading

import pytest

from storefront.application.use_cases.notifications import (
    NotificationWriter,
    build_notification_id,
    run_with_concurrency,
)
from storefront.domain.entities import Announcement, Recipient
from storefront.domain.exceptions import DeliveryFailed, DeliveryTimeout

pytestmark = pytest.mark.anyio

ANNOUNCEMENT = Announcement(title="Rebajas", message="20% en toda la tienda")


async def test_write_appends_unread_record(fake_store, recipients) -> None:
    writer = NotificationWriter(fake_store)

    record = await writer.write_to(recipients[0], ANNOUNCEMENT)

    assert record.is_read is False
    assert record.title == "Rebajas"
    assert record.id.split("_")[1] == "1"
    stored = fake_store.notifications[1]
    assert [item.id for item in stored] == [record.id]
    assert stored[0].timestamp is not None


def test_ids_are_unique_for_the_same_recipient() -> None:
    ids = {build_notification_id(7) for _ in range(500)}

    assert len(ids) == 500


async def test_store_error_becomes_delivery_failed(fake_store, recipients) -> None:
    fake_store.fail_for.add(2)
    writer = NotificationWriter(fake_store)

    with pytest.raises(DeliveryFailed) as excinfo:
        await writer.write_to(recipients[1], ANNOUNCEMENT)

    assert excinfo.value.recipient_id == 2
    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert not isinstance(excinfo.value, DeliveryTimeout)


async def test_hanging_write_times_out_without_blocking_others(
    fake_store, recipients
) -> None:
    fake_store.hang_for.add(2)
    writer = NotificationWriter(fake_store, timeout=0.05)

    results = await run_with_concurrency(
        recipients,
        lambda recipient, index: writer.write_to(recipient, ANNOUNCEMENT),
        3,
    )

    assert isinstance(results[1], DeliveryTimeout)
    assert results[1].timeout == pytest.approx(0.05)
    assert not isinstance(results[0], Exception)
    assert not isinstance(results[2], Exception)
    assert len(fake_store.notifications[1]) == 1
    assert len(fake_store.notifications[3]) == 1
    assert fake_store.notifications[2] == []


async def test_per_call_timeout_overrides_default(fake_store, recipients) -> None:
    fake_store.hang_for.add(1)
    writer = NotificationWriter(fake_store, timeout=30)

    with pytest.raises(DeliveryTimeout):
        await writer.write_to(recipients[0], ANNOUNCEMENT, timeout=0.01)


async def test_email_is_sent_after_successful_write(fake_store, recipients) -> None:
    sent: list[tuple[str, str, str]] = []
    lock = threading.Lock()

    def email_sender(email: str, title: str, message: str) -> bool:
        with lock:
            sent.append((email, title, message))
        return True

    writer = NotificationWriter(fake_store, email_sender=email_sender)

    for recipient in recipients:
        await writer.write_to(recipient, ANNOUNCEMENT)
    await writer.wait_for_background()

    assert sorted(sent) == [
        ("ana@example.com", "Rebajas", "20% en toda la tienda"),
        ("bruno@example.com", "Rebajas", "20% en toda la tienda"),
    ]


async def test_email_is_skipped_when_write_fails(fake_store, recipients) -> None:
    sent: list[str] = []
    fake_store.fail_for.add(1)
    writer = NotificationWriter(
        fake_store, email_sender=lambda email, title, message: sent.append(email) or True
    )

    with pytest.raises(DeliveryFailed):
        await writer.write_to(recipients[0], ANNOUNCEMENT)
    await writer.wait_for_background()

    assert sent == []


async def test_email_failure_never_changes_the_outcome(
    fake_store, recipients, caplog
) -> None:
    def broken_sender(email: str, title: str, message: str) -> bool:
        raise RuntimeError("smtp down")

    writer = NotificationWriter(fake_store, email_sender=broken_sender)

    with caplog.at_level(logging.ERROR):
        record = await writer.write_to(recipients[0], ANNOUNCEMENT)
        await writer.wait_for_background()

    assert fake_store.notifications[1][0].id == record.id
    assert "Error sending announcement email to ana@example.com" in caplog.text
