"""
Module: tests/unit/test_email_triage.py

What:
    Validate keyword classification, sender parsing, and the
    ``run_email_triage`` report built from scripted ``gog`` output.

Why:
    Agents branch on the bucket names and summary counts; rule order matters
    because a promotional invoice must stay ``fyi``.
"""

import json

import pytest

from lobster.workflows import WorkflowError, classify_email, parse_email_address, run_email_triage

from fakes import FakeRunner


@pytest.mark.parametrize(
    ("subject", "snippet", "bucket", "reason"),
    [
        ("Weekly newsletter", "", "fyi", "newsletter/promo-ish"),
        ("Your invoice", "click to unsubscribe", "fyi", "newsletter/promo-ish"),
        ("Invoice #123", "", "needs_action", "finance keyword"),
        ("Card CHARGED", "", "needs_action", "finance keyword"),
        ("Server down", "please fix ASAP", "needs_action", "urgency keyword"),
        ("Report", "deadline is Friday?", "needs_action", "urgency keyword"),
        ("Lunch tomorrow?", "", "needs_reply", "question mark"),
        ("Hello", "just checking in", "fyi", "default"),
    ],
)
def test_classify_email(subject: str, snippet: str, bucket: str, reason: str) -> None:
    classification = classify_email(subject, snippet)

    assert (classification.bucket, classification.reason) == (bucket, reason)


@pytest.mark.parametrize(
    ("sender", "expected"),
    [
        ("Ada Lovelace <ada@example.com>", "ada@example.com"),
        ("  bob@example.com  ", "bob@example.com"),
        ("<  spaced@example.com >", "spaced@example.com"),
        (None, ""),
    ],
)
def test_parse_email_address(sender, expected: str) -> None:
    assert parse_email_address(sender) == expected


def _search_output() -> str:
    return json.dumps(
        [
            {
                "id": "m1",
                "threadId": "t1",
                "from": "Ada <ada@example.com>",
                "subject": "Can we meet?",
                "snippet": "",
                "date": "2026-10-18",
            },
            {
                "Id": "m2",
                "ThreadId": "t2",
                "From": "billing@example.com",
                "Subject": "Receipt",
                "Snippet": "Thanks for your payment",
                "Date": "2026-10-18",
            },
            {"id": "m3", "from": "news@example.com", "subject": "Big SALE", "snippet": "today"},
        ]
    )


def test_report_shape_and_buckets(fake_runner: FakeRunner) -> None:
    fake_runner.queue(_search_output())

    report = run_email_triage(runner=fake_runner, env={})

    assert report["kind"] == "email.triage"
    assert report["query"] == "newer_than:1d"
    assert report["max"] == 20
    assert report["summary"] == {"total": 3, "needs_reply": 1, "needs_action": 1, "fyi": 1}

    first, second, third = report["items"]
    assert list(first) == [
        "id",
        "threadId",
        "from",
        "fromEmail",
        "subject",
        "snippet",
        "date",
        "bucket",
        "reason",
        "raw",
    ]
    assert first["fromEmail"] == "ada@example.com"
    assert first["bucket"] == "needs_reply"
    assert second["id"] == "m2"
    assert second["threadId"] == "t2"
    assert second["from"] == "billing@example.com"
    assert second["reason"] == "finance keyword"
    assert second["raw"]["Subject"] == "Receipt"
    assert third["date"] is None
    assert [item["id"] for item in report["buckets"]["fyi"]] == ["m3"]


def test_search_arguments_and_account(fake_runner: FakeRunner) -> None:
    fake_runner.queue("[]")

    run_email_triage(
        runner=fake_runner,
        query="in:inbox is:unread",
        max_results=5,
        account="me@example.com",
        env={"PATH": "/usr/bin"},
        gog="gog-beta",
    )

    (call,) = fake_runner.calls
    assert call.command == "gog-beta"
    assert call.args == ["gmail", "search", "in:inbox is:unread", "--max", "5", "--json", "--no-input"]
    assert call.env == {"PATH": "/usr/bin", "GOG_ACCOUNT": "me@example.com"}


def test_empty_output_means_no_messages(fake_runner: FakeRunner) -> None:
    fake_runner.queue("   \n")

    report = run_email_triage(runner=fake_runner, env={})

    assert report["summary"] == {"total": 0, "needs_reply": 0, "needs_action": 0, "fyi": 0}
    assert report["buckets"] == {"needs_reply": [], "needs_action": [], "fyi": []}


def test_single_object_output_is_wrapped(fake_runner: FakeRunner) -> None:
    fake_runner.queue(json.dumps({"id": "solo", "subject": "Urgent: action required"}))

    report = run_email_triage(runner=fake_runner, env={})

    assert [item["id"] for item in report["items"]] == ["solo"]
    assert report["items"][0]["reason"] == "urgency keyword"


def test_non_json_output_raises(fake_runner: FakeRunner) -> None:
    fake_runner.queue("Error: not logged in")

    with pytest.raises(WorkflowError, match="gog gmail search returned non-JSON output"):
        run_email_triage(runner=fake_runner, env={})
