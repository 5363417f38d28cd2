"""
Text moderation backed by the Hugging Face Inference API.

The classifier is a hosted text-classification model that labels text as
``hate`` or ``nothate``. The check fails open: when the token is missing or
the API misbehaves, content is treated as safe and the problem is logged.
"""
import logging
from typing import Any, List, Optional

import httpx

from linkup.core.config import settings

logger = logging.getLogger(__name__)


class ModerationService:
    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        token: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self._http = client
        self.token = settings.HF_TOKEN if token is None else token
        self.model = model or settings.HF_MODERATION_MODEL
        self.base_url = (base_url or settings.HF_INFERENCE_URL).rstrip("/")
        self.unsafe_label = settings.HF_UNSAFE_LABEL
        self.threshold = settings.HF_UNSAFE_THRESHOLD

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}"

    async def _post(self, **kwargs) -> httpx.Response:
        if self._http is not None:
            return await self._http.post(self.endpoint, **kwargs)
        async with httpx.AsyncClient(timeout=settings.EXTERNAL_TIMEOUT_SECONDS) as client:
            return await client.post(self.endpoint, **kwargs)

    @staticmethod
    def _predictions(data: Any) -> List[dict]:
        # The API answers [[{label, score}, ...]] for one input, older models answer [{label, score}, ...]
        if isinstance(data, list) and data and isinstance(data[0], list):
            data = data[0]
        if not isinstance(data, list):
            raise ValueError(f"Unexpected moderation response: {data!r}")
        # Entries without a numeric score are ignored, a response with none of them is unflagged
        return [
            p
            for p in data
            if isinstance(p, dict)
            and "label" in p
            and isinstance(p.get("score"), (int, float))
            and not isinstance(p.get("score"), bool)
        ]

    def _is_unsafe(self, predictions: List[dict]) -> bool:
        if not predictions:
            return False
        top = max(predictions, key=lambda p: p["score"])
        return str(top["label"]).lower() == self.unsafe_label and top["score"] >= self.threshold

    async def is_safe(self, text: Optional[str]) -> bool:
        """Return False only when the classifier positively flags the text."""
        if not text or not text.strip():
            return True
        if not self.token:
            logger.warning("HF_TOKEN not set, skipping content moderation")
            return True

        try:
            response = await self._post(
                json={"inputs": text},
                headers={"Authorization": f"Bearer {self.token}"},
            )
            response.raise_for_status()
            predictions = self._predictions(response.json())
        except httpx.HTTPError as e:
            logger.error(f"Moderation request failed, allowing content: {e}")
            return True
        except ValueError as e:
            logger.error(f"Moderation response unreadable, allowing content: {e}")
            return True

        if self._is_unsafe(predictions):
            logger.info(f"Content flagged by {self.model}: {predictions}")
            return False
        return True


moderation_service = ModerationService()


def get_moderation_service() -> ModerationService:
    return moderation_service
