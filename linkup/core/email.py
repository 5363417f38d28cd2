"""
Transactional email delivery through the SendGrid v3 REST API.

Delivery is best-effort: every failure is logged and reported as ``False`` so
callers decide whether the user should hear about it.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from linkup.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        sender: Optional[str] = None,
        api_url: Optional[str] = None,
    ) -> None:
        self._http = client
        self.api_key = settings.SENDGRID_API_KEY if api_key is None else api_key
        self.sender = sender or settings.EMAIL_FROM
        self.api_url = api_url or settings.SENDGRID_API_URL

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _payload(self, to: str, subject: str, text: str, html: Optional[str]) -> Dict[str, Any]:
        content = [{"type": "text/plain", "value": text}]
        if html:
            content.append({"type": "text/html", "value": html})
        return {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.sender},
            "subject": subject,
            "content": content,
        }

    async def _post(self, **kwargs) -> httpx.Response:
        if self._http is not None:
            return await self._http.post(self.api_url, **kwargs)
        async with httpx.AsyncClient(timeout=settings.EXTERNAL_TIMEOUT_SECONDS) as client:
            return await client.post(self.api_url, **kwargs)

    async def send_email(self, to: str, subject: str, text: str, html: Optional[str] = None) -> bool:
        if not self.configured:
            logger.warning(f"SENDGRID_API_KEY not set, email '{subject}' to {to} not sent")
            return False

        try:
            response = await self._post(
                json=self._payload(to, subject, text, html),
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"SendGrid rejected email to {to}: {e.response.status_code} {e.response.text}")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Error sending email to {to}: {e}")
            return False

        logger.info(f"Email '{subject}' sent to {to}")
        return True

    async def send_password_reset_code(self, to: str, code: str) -> bool:
        minutes = settings.RESET_CODE_EXPIRE_MINUTES
        text = (
            f"Your LinkUp password reset code is {code}.\n"
            f"It expires in {minutes} minutes. If you did not ask for a reset, ignore this email."
        )
        html = (
            "<p>Your LinkUp password reset code is:</p>"
            f"<h2 style=\"letter-spacing:4px\">{code}</h2>"
            f"<p>It expires in {minutes} minutes. If you did not ask for a reset, ignore this email.</p>"
        )
        return await self.send_email(to, "Your LinkUp password reset code", text, html)


email_service = EmailService()


def get_email_service() -> EmailService:
    return email_service
