"""Google Home notifier client: one form POST per message, best effort."""

import time

import httpx

from homerelay.config import NOTIFIER_TIMEOUT_SECONDS
from homerelay.models import NotificationRequest, NotificationResult
from homerelay.utils.logger import get_logger

logger = get_logger("homerelay.notifier")

_BODY_LOG_LIMIT = 500


class Notifier:
    """Posts `text=<message>` to a fixed endpoint.

    send() never raises and never retries; failures come back as a failed
    NotificationResult and are logged. Pass http_client to share a client
    (or a MockTransport in tests); otherwise the notifier owns its client
    and closes it in aclose().
    """

    def __init__(
        self,
        url: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = NOTIFIER_TIMEOUT_SECONDS,
    ):
        self._url = url
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        logger.info("notifier.init", url=url)

    @property
    def url(self) -> str:
        return self._url

    async def send(self, text: str) -> NotificationResult:
        if not text:
            logger.warning("notifier.send.empty_text")
            return NotificationResult(status="failed", text=text or "", error="empty message")

        request = NotificationRequest(text=text)
        log = logger.bind(url=self._url, text=text)
        started = time.perf_counter()
        try:
            response = await self._client.post(self._url, data=request.form())
        except httpx.HTTPError as e:
            elapsed = (time.perf_counter() - started) * 1000
            log.error("notifier.send.transport_error", error=str(e), error_type=type(e).__name__)
            return NotificationResult(status="failed", text=text, error=str(e) or type(e).__name__, elapsed_ms=elapsed)
        except Exception as e:
            elapsed = (time.perf_counter() - started) * 1000
            log.exception("notifier.send.unexpected_error", error=str(e))
            return NotificationResult(status="failed", text=text, error=str(e), elapsed_ms=elapsed)

        elapsed = (time.perf_counter() - started) * 1000
        body = response.text
        if not response.is_success:
            log.error(
                "notifier.send.failed",
                status_code=response.status_code,
                body=body[:_BODY_LOG_LIMIT],
            )
            return NotificationResult(
                status="failed",
                text=text,
                status_code=response.status_code,
                body=body,
                error=f"HTTP {response.status_code}",
                elapsed_ms=elapsed,
            )

        log.info(
            "notifier.send.delivered",
            status_code=response.status_code,
            body=body[:_BODY_LOG_LIMIT],
            elapsed_ms=round(elapsed, 1),
        )
        return NotificationResult(
            status="delivered",
            text=text,
            status_code=response.status_code,
            body=body,
            elapsed_ms=elapsed,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "Notifier":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
