from __future__ import annotations

from pydantic import SecretStr

from znuny_rest_client.config.redact import (
    REDACTED_VALUE,
    redact_settings_dict,
    scrub_secrets_in_text,
)


def test_redact_settings_dict_redacts_password_keys() -> None:
    raw = {
        "ZNUNY_PASSWORD": "pw",
        "OTRS_PASSWORD": "legacy",
        "znuny": {"username": "agent", "password": "pw2"},
        "Password": "wire",
        "SessionID": "sess",
    }

    out = redact_settings_dict(raw)

    assert out["ZNUNY_PASSWORD"] == REDACTED_VALUE
    assert out["OTRS_PASSWORD"] == REDACTED_VALUE
    assert out["znuny"]["password"] == REDACTED_VALUE
    assert out["znuny"]["username"] == "agent"
    assert out["Password"] == REDACTED_VALUE
    assert out["SessionID"] == REDACTED_VALUE

    # Input is not mutated.
    assert raw["ZNUNY_PASSWORD"] == "pw"


def test_redact_settings_dict_redacts_secretstr_values() -> None:
    raw = {"ok": 1, "anything": SecretStr("value")}
    out = redact_settings_dict(raw)
    assert out["anything"] == REDACTED_VALUE
    assert out["ok"] == 1


def test_scrub_secrets_in_query_string() -> None:
    url = (
        "https://znuny.example/otrs/nph-genericinterface.pl/Webservice/X/Ticket/5"
        "?Extended=0&UserLogin=agent&Password=hunter2"
    )
    out = scrub_secrets_in_text(url)

    assert "hunter2" not in out
    assert "UserLogin=agent" in out
    assert "Extended=0" in out
    assert f"Password={REDACTED_VALUE}" in out


def test_scrub_secrets_in_json_text() -> None:
    out = scrub_secrets_in_text('{"UserLogin": "agent", "Password": "hunter2", "SessionID":"abc"}')

    assert "hunter2" not in out
    assert "abc" not in out
    assert '"UserLogin": "agent"' in out


def test_scrub_secrets_in_text_redacts_common_credential_patterns() -> None:
    text = "boom Authorization: Basic abc123 password=pw123 token: tok456"
    out = scrub_secrets_in_text(text)
    assert "abc123" not in out
    assert "pw123" not in out
    assert "tok456" not in out
    assert REDACTED_VALUE in out
