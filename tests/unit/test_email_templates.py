"""Transactional email bodies."""

from datetime import datetime, timezone

from engage.infrastructure.external.email import templates


def test_participation_approved_escapes_user_text() -> None:
    subject, body = templates.participation_approved(
        "Jane <Doe>",
        "Quiz & Pizza",
        datetime(2026, 11, 20, 18, 30, tzinfo=timezone.utc),
        "Tour First",
    )
    assert subject == "Participation confirmée : Quiz & Pizza"
    assert "Jane &lt;Doe&gt;" in body
    assert "Quiz &amp; Pizza" in body
    assert "20/11/2026 18:30" in body


def test_participation_rejected_subject() -> None:
    subject, body = templates.participation_rejected("Jane", "Afterwork")
    assert subject == "Participation refusée : Afterwork"
    assert "Afterwork" in body


def test_reset_link_encodes_query() -> None:
    link = templates.reset_password_link("https://engage.example/", "a+b@ey.com", "t/k=n")
    assert link == "https://engage.example/reset-password?email=a%2Bb%40ey.com&token=t%2Fk%3Dn"


def test_credentials_mail_contains_temporary_password() -> None:
    subject, body = templates.account_credentials(
        "Jane", "jane@ey.com", "Tmp#Pass1", "https://engage.example/login"
    )
    assert subject == "Vos identifiants EY Engage"
    assert "Tmp#Pass1" in body
    assert 'href="https://engage.example/login"' in body


def test_password_reset_mentions_ttl() -> None:
    _, body = templates.password_reset("Jane", "https://engage.example/reset?x=1&y=2", 30)
    assert "30 minutes" in body
    assert "x=1&amp;y=2" in body
