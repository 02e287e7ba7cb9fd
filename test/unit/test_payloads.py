from __future__ import annotations

import pytest

from znuny_rest_client.domain.errors import ValidationError
from znuny_rest_client.domain.payloads import (
    DEFAULT_CONTENT_TYPE,
    CommunicationChannel,
    build_article,
    build_ticket,
)


def test_build_ticket_with_queue_id_sets_only_queue_id() -> None:
    ticket = build_ticket("Printer on fire", "customer@example.com", queue_id=3)

    assert ticket == {
        "LockState": "unlock",
        "PriorityID": 2,
        "State": "new",
        "CustomerUser": "customer@example.com",
        "Title": "Printer on fire",
        "QueueID": 3,
    }
    assert "Queue" not in ticket


def test_build_ticket_with_queue_name_sets_only_queue() -> None:
    ticket = build_ticket("Printer on fire", "customer@example.com", queue_name="Raw")

    assert ticket["Queue"] == "Raw"
    assert "QueueID" not in ticket


def test_build_ticket_numeric_looking_queue_name_stays_a_name() -> None:
    ticket = build_ticket("Title", "cust", queue_name="42")

    assert ticket["Queue"] == "42"
    assert "QueueID" not in ticket


def test_build_ticket_extra_overrides_defaults_but_not_title_or_customer() -> None:
    ticket = build_ticket(
        "Real title",
        "real-customer",
        {
            "State": "open",
            "PriorityID": 4,
            "Title": "Sneaky",
            "CustomerUser": "someone-else",
            "Type": "Incident",
        },
        queue_name="Raw",
    )

    assert ticket["State"] == "open"
    assert ticket["PriorityID"] == 4
    assert ticket["LockState"] == "unlock"
    assert ticket["Type"] == "Incident"
    assert ticket["Title"] == "Real title"
    assert ticket["CustomerUser"] == "real-customer"


def test_build_ticket_drops_queue_keys_from_extra() -> None:
    ticket = build_ticket("Title", "cust", {"Queue": "Junk"}, queue_id=7)

    assert ticket["QueueID"] == 7
    assert "Queue" not in ticket


def test_build_ticket_does_not_mutate_extra() -> None:
    extra = {"State": "open", "QueueID": 9}
    build_ticket("Title", "cust", extra, queue_name="Raw")
    assert extra == {"State": "open", "QueueID": 9}


@pytest.mark.parametrize("title", ["", "   ", "\n\t"])
def test_build_ticket_blank_title_fails(title: str) -> None:
    with pytest.raises(ValidationError) as exc:
        build_ticket(title, "cust", queue_id=1)
    assert exc.value.field == "title"
    assert "title" in str(exc.value).lower()


def test_build_ticket_rejects_both_queue_id_and_name() -> None:
    with pytest.raises(ValidationError) as exc:
        build_ticket("Title", "cust", queue_id=1, queue_name="Raw")
    assert exc.value.field == "queue"


def test_build_ticket_rejects_missing_queue() -> None:
    with pytest.raises(ValidationError):
        build_ticket("Title", "cust")


def test_build_ticket_rejects_bool_queue_id() -> None:
    with pytest.raises(ValidationError):
        build_ticket("Title", "cust", queue_id=True)


def test_build_article_base_fields() -> None:
    article = build_article("creator", "Subject", "Body", communication_channel="Email")

    assert article == {
        "Subject": "Subject",
        "Body": "Body",
        "CommunicationChannel": "Email",
        "ContentType": DEFAULT_CONTENT_TYPE,
        "HistoryType": "WebRequestCustomer",
        "HistoryComment": "creator",
        "SenderType": "system",
    }


def test_build_article_empty_subject_cites_subject() -> None:
    with pytest.raises(ValidationError) as exc:
        build_article("creator", "", "x")
    assert exc.value.field == "subject"
    assert "subject" in str(exc.value).lower()


def test_build_article_empty_body_cites_body() -> None:
    with pytest.raises(ValidationError) as exc:
        build_article("creator", "x", "   ")
    assert exc.value.field == "body"
    assert "body" in str(exc.value).lower()


def test_build_article_checks_subject_before_body() -> None:
    with pytest.raises(ValidationError) as exc:
        build_article("creator", " ", "")
    assert exc.value.field == "subject"


def test_build_article_sets_from_only_when_given() -> None:
    with_from = build_article("c", "S", "B", "a@b.com", communication_channel="Email")
    without_from = build_article("c", "S", "B", "", communication_channel="Email")

    assert with_from["From"] == "a@b.com"
    assert "From" not in without_from


def test_build_article_extra_overrides_base_fields() -> None:
    article = build_article(
        "c",
        "S",
        "B",
        communication_channel="Email",
        extra={"ContentType": "text/html; charset=utf-8", "SenderType": "agent", "TimeUnit": 5},
    )

    assert article["ContentType"] == "text/html; charset=utf-8"
    assert article["SenderType"] == "agent"
    assert article["TimeUnit"] == 5


def test_note_internal_forces_internal_channel_and_no_agent_notify() -> None:
    article = build_article(
        "c",
        "S",
        "B",
        communication_channel="note-internal",
        extra={"CommunicationChannel": "Phone", "NoAgentNotify": 0},
    )

    assert article["NoAgentNotify"] == 1
    assert article["CommunicationChannel"] == "Internal"
    assert "OrigHeader" not in article
    assert "Loop" not in article


def test_internal_channel_adds_orig_header() -> None:
    article = build_article("c", "S", "B", "a@b.com", communication_channel="Internal")

    assert article["Loop"] == 0
    assert article["AutoResponseType"] == "auto reply"
    assert article["OrigHeader"] == {
        "From": "a@b.com",
        "To": "Postmaster",
        "Subject": "S",
        "Body": "B",
    }
    assert article["CommunicationChannel"] == "Internal"
    assert "NoAgentNotify" not in article


def test_internal_is_the_default_channel() -> None:
    article = build_article("c", "S", "B")
    assert article["CommunicationChannel"] == "Internal"
    assert article["OrigHeader"]["From"] is None


def test_unknown_channel_leaves_payload_unchanged() -> None:
    article = build_article("c", "S", "B", communication_channel="Chat")

    assert article["CommunicationChannel"] == "Chat"
    for key in ("NoAgentNotify", "Loop", "AutoResponseType", "OrigHeader"):
        assert key not in article


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("note-internal", CommunicationChannel.NOTE_INTERNAL),
        ("Internal", CommunicationChannel.INTERNAL),
        ("internal", CommunicationChannel.OTHER),
        ("Email", CommunicationChannel.OTHER),
        ("", CommunicationChannel.OTHER),
    ],
)
def test_communication_channel_parse(raw: str, expected: CommunicationChannel) -> None:
    assert CommunicationChannel.parse(raw) is expected
