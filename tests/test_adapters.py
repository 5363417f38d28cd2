"""
Tests for the hosted-service adapters: moderation, email and media storage.
"""
import json
from io import BytesIO

import httpx
import pytest
from starlette.datastructures import UploadFile

from linkup.core.email import EmailService
from linkup.core.errors import ExternalServiceError
from linkup.core.moderation import ModerationService
from linkup.core.storage import R2Storage


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestModeration:
    async def test_flags_hateful_text(self):
        def handler(request):
            assert request.headers["Authorization"] == "Bearer hf-test"
            assert json.loads(request.content) == {"inputs": "nasty words"}
            return httpx.Response(200, json=[[{"label": "hate", "score": 0.91}, {"label": "nothate", "score": 0.09}]])

        service = ModerationService(client=mock_client(handler), token="hf-test")
        assert await service.is_safe("nasty words") is False

    async def test_flat_response_and_safe_label(self):
        def handler(request):
            return httpx.Response(200, json=[{"label": "nothate", "score": 0.8}, {"label": "hate", "score": 0.2}])

        service = ModerationService(client=mock_client(handler), token="hf-test")
        assert await service.is_safe("have a nice day") is True

    async def test_low_confidence_is_safe(self):
        def handler(request):
            return httpx.Response(200, json=[[{"label": "hate", "score": 0.4}]])

        service = ModerationService(client=mock_client(handler), token="hf-test")
        assert await service.is_safe("borderline") is True

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(503, json={"error": "Model is loading"}),
            httpx.Response(200, json={"unexpected": True}),
            httpx.Response(200, content=b"not json"),
            httpx.Response(200, json=[[{"label": "hate", "score": None}]]),
            httpx.Response(200, json=[[{"label": "hate", "score": "0.9"}, {"label": "nothate", "score": 0.1}]]),
        ],
    )
    async def test_fails_open(self, response):
        service = ModerationService(client=mock_client(lambda request: response), token="hf-test")
        assert await service.is_safe("anything") is True

    async def test_network_error_fails_open(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        service = ModerationService(client=mock_client(handler), token="hf-test")
        assert await service.is_safe("anything") is True

    async def test_missing_token_skips_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        service = ModerationService(client=mock_client(handler), token="")
        assert await service.is_safe("anything") is True


class TestEmail:
    async def test_sends_reset_code(self):
        sent = []

        def handler(request):
            sent.append(json.loads(request.content))
            assert request.headers["Authorization"] == "Bearer sg-test"
            return httpx.Response(202)

        service = EmailService(client=mock_client(handler), api_key="sg-test", sender="noreply@example.com")

        assert await service.send_password_reset_code("alice@example.com", "4821") is True
        payload = sent[0]
        assert payload["personalizations"][0]["to"] == [{"email": "alice@example.com"}]
        assert payload["from"] == {"email": "noreply@example.com"}
        assert "4821" in payload["content"][0]["value"]

    async def test_rejected_request(self):
        service = EmailService(
            client=mock_client(lambda request: httpx.Response(401, json={"errors": []})),
            api_key="sg-test",
        )
        assert await service.send_email("alice@example.com", "Hi", "Hello") is False

    async def test_unconfigured(self):
        service = EmailService(api_key="")
        assert service.configured is False
        assert await service.send_email("alice@example.com", "Hi", "Hello") is False


class FailingS3Client:
    def put_object(self, **kwargs):
        from botocore.exceptions import EndpointConnectionError

        raise EndpointConnectionError(endpoint_url="https://r2.example.com")


class TestStorage:
    async def test_local_fallback_round_trip(self, tmp_path, monkeypatch):
        storage = R2Storage()
        monkeypatch.setattr(storage, "upload_dir", str(tmp_path))
        upload = UploadFile(file=BytesIO(b"image-bytes"), filename="pic.png")

        url = await storage.upload_file(upload, prefix="post_media")

        assert url.startswith(storage.proxy_prefix + "post_media/")
        key = storage.key_from_url(url)
        with open(storage.local_path(key), "rb") as stored:
            assert stored.read() == b"image-bytes"
        assert storage.delete_file(url) is True
        assert storage.delete_file(url) is False

    async def test_upload_failure_raises(self):
        storage = R2Storage(client=FailingS3Client())
        upload = UploadFile(file=BytesIO(b"image-bytes"), filename="pic.png")

        with pytest.raises(ExternalServiceError):
            await storage.upload_file(upload, prefix="post_media")

    def test_unknown_url_is_not_deleted(self):
        assert R2Storage().delete_file("https://elsewhere.example.com/pic.png") is False
