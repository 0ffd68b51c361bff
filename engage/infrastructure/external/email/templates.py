"""HTML bodies for the transactional emails (participation decisions, credentials, reset)."""

from __future__ import annotations

from datetime import datetime
from html import escape
from urllib.parse import urlencode

_LAYOUT = """<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; color: #2e2e38; padding: 20px;">
{content}
<p style="color: #747480; font-size: 11px;">EY Engage. Ceci est un message automatique, merci de ne pas y répondre.</p>
</body>
</html>
"""


def _render(content: str) -> str:
    return _LAYOUT.format(content=content)


def participation_approved(full_name: str, title: str, date: datetime, location: str) -> tuple[str, str]:
    """Return (subject, html_body) for an approved participation."""
    subject = f"Participation confirmée : {title}"
    body = _render(
        f"<p>Bonjour {escape(full_name)},</p>"
        f"<p>Votre participation à l'événement <strong>{escape(title)}</strong> a été confirmée.</p>"
        f"<p>Date : {date:%d/%m/%Y %H:%M}<br>Lieu : {escape(location)}</p>"
    )
    return subject, body


def participation_rejected(full_name: str, title: str) -> tuple[str, str]:
    subject = f"Participation refusée : {title}"
    body = _render(
        f"<p>Bonjour {escape(full_name)},</p>"
        f"<p>Votre demande de participation à l'événement <strong>{escape(title)}</strong> "
        "n'a pas été retenue.</p>"
    )
    return subject, body


def account_credentials(full_name: str, email: str, temporary_password: str, login_url: str) -> tuple[str, str]:
    """Credentials for an admin-created account. The password must be changed at first login."""
    subject = "Vos identifiants EY Engage"
    body = _render(
        f"<p>Bonjour {escape(full_name)},</p>"
        "<p>Un compte EY Engage a été créé pour vous.</p>"
        f"<p>Email : {escape(email)}<br>Mot de passe temporaire : <code>{escape(temporary_password)}</code></p>"
        f'<p>Connectez-vous sur <a href="{escape(login_url)}">{escape(login_url)}</a> '
        "et changez votre mot de passe à la première connexion.</p>"
    )
    return subject, body


def reset_password_link(frontend_url: str, email: str, token: str) -> str:
    query = urlencode({"email": email, "token": token})
    return f"{frontend_url.rstrip('/')}/reset-password?{query}"


def password_reset(full_name: str, reset_url: str, ttl_minutes: int) -> tuple[str, str]:
    subject = "Réinitialisation de votre mot de passe"
    body = _render(
        f"<p>Bonjour {escape(full_name)},</p>"
        "<p>Une réinitialisation de mot de passe a été demandée pour votre compte.</p>"
        f'<p><a href="{escape(reset_url)}">Réinitialiser mon mot de passe</a></p>'
        f"<p>Ce lien expire dans {ttl_minutes} minutes. Si vous n'êtes pas à l'origine "
        "de cette demande, ignorez ce message.</p>"
    )
    return subject, body
