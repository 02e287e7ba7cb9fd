from __future__ import annotations

import pytest

from znuny_rest_client.domain.normalize import normalize_key, normalize_keys


def test_normalize_keys_rewrites_nested_id_suffixes() -> None:
    raw = {"TicketID": 5, "Ticket": [{"CustomerID": "x"}]}

    assert normalize_keys(raw) == {"ticketId": 5, "ticket": [{"customerId": "x"}]}


def test_normalize_keys_leaves_integer_keys_alone() -> None:
    raw = {0: {"QueueID": 1}, 1: {"QueueID": 2}}

    assert normalize_keys(raw) == {0: {"queueId": 1}, 1: {"queueId": 2}}


def test_normalize_keys_handles_deep_nesting() -> None:
    raw = {
        "Ticket": [
            {
                "Article": [
                    {"ArticleID": 1, "Attachment": [{"FileID": 3, "ContentType": "text/plain"}]},
                ],
                "DynamicField": [{"Name": "ProcessID", "Value": None}],
            }
        ]
    }

    assert normalize_keys(raw) == {
        "ticket": [
            {
                "article": [
                    {"articleId": 1, "attachment": [{"fileId": 3, "contentType": "text/plain"}]},
                ],
                "dynamicField": [{"name": "ProcessID", "value": None}],
            }
        ]
    }


def test_normalize_keys_does_not_touch_values() -> None:
    raw = {"Title": "TicketID in title", "Tags": ["QueueID"]}

    assert normalize_keys(raw) == {"title": "TicketID in title", "tags": ["QueueID"]}


def test_normalize_keys_does_not_mutate_input() -> None:
    raw = {"TicketID": 1, "Ticket": [{"OwnerID": 2}]}
    normalize_keys(raw)
    assert raw == {"TicketID": 1, "Ticket": [{"OwnerID": 2}]}


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("SessionID", "sessionId"),
        ("TicketIDs", "ticketIds"),
        ("ResponsibleUserID", "responsibleUserId"),
        ("DynamicField_CustomerID", "dynamicField_CustomerId"),
        ("UnlockTimeout", "unlockTimeout"),
        ("ticketNumber", "ticketNumber"),
        ("", ""),
        (3, 3),
    ],
)
def test_normalize_key(key: object, expected: object) -> None:
    assert normalize_key(key) == expected


@pytest.mark.parametrize("value", [None, 7, "TicketID", 1.5, True])
def test_normalize_keys_scalars_pass_through(value: object) -> None:
    assert normalize_keys(value) == value
