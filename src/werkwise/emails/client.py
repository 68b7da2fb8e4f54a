from __future__ import annotations

import html
import logging
import re
from datetime import datetime
from typing import Optional

import requests

from .model import SendResult

logger = logging.getLogger(__name__)

POSTMARK_API_URL = "https://api.postmarkapp.com/email"

_TAG_RE = re.compile(r"<[^>]*>")

_HTML = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>
      body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }}
      .header {{ background-color: #dc2626; color: white; padding: 20px; text-align: center; border-radius: 8px 8px 0 0; }}
      .content {{ padding: 20px; background-color: #f9f9f9; border-radius: 0 0 8px 8px; }}
      .footer {{ text-align: center; padding: 20px; font-size: 12px; color: #666; }}
      pre {{ white-space: pre-wrap; font-family: inherit; }}
    </style>
  </head>
  <body>
    <div class="header"><h1>Werkwise Urenregistratie</h1></div>
    <div class="content"><pre>{body}</pre></div>
    <div class="footer">
      <p>Dit is een automatisch gegenereerde e-mail van het Werkwise systeem.</p>
      <p>&copy; {year} Werkwise - Alle rechten voorbehouden</p>
    </div>
  </body>
</html>
"""


def wrap_html(subject: str, body: str, *, year: int) -> str:
    return _HTML.format(title=html.escape(subject), body=body, year=year)


def strip_tags(body: str) -> str:
    return _TAG_RE.sub("", body)


class EmailClient:
    """Sends transactional mail through the Postmark HTTP API.

    Delivery problems come back as a failed SendResult so callers can log them
    per recipient and carry on.
    """

    def __init__(
        self,
        *,
        server_token: Optional[str],
        from_email: str,
        api_url: str = POSTMARK_API_URL,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ):
        self._token = server_token
        self._from_email = from_email
        self._api_url = api_url
        self._timeout = timeout
        self._session = session or requests.Session()

    def is_configured(self) -> bool:
        return bool(self._token)

    def send(self, to: str, subject: str, body: str) -> SendResult:
        if not self._token:
            return SendResult(success=False, error="POSTMARK_SERVER_TOKEN not configured")

        payload = {
            "From": self._from_email,
            "To": to,
            "Subject": subject,
            "HtmlBody": wrap_html(subject, body, year=datetime.now().year),
            "TextBody": strip_tags(body),
            "MessageStream": "outbound",
        }
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "X-Postmark-Server-Token": self._token,
        }

        try:
            resp = self._session.post(self._api_url, json=payload, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning("E-mail to %s failed: %s", to, e)
            return SendResult(success=False, error=str(e))

        if resp.status_code >= 300:
            logger.warning("Postmark rejected e-mail to %s: %s", to, resp.text)
            return SendResult(success=False, error=f"Postmark API error: {resp.text}")

        logger.info("E-mail sent to %s (%s)", to, subject)
        return SendResult(success=True)
