"""HTTP client delivering message units to the back-end.

The DeliveryClient pushes a single message unit to the back-end REST
service. The metadata of the message unit is carried in HTTP headers (see
hb2b_rest.protocol.headers); a User Message is POSTed to ``{base}/deliver``
with its payload as the entity body, Receipt and Error Signals are POSTed
with an empty body to ``{base}/notify/receipt`` and ``{base}/notify/error``.

The back-end signals acceptance only through the HTTP status: any 2xx code
is success, any other code or the absence of a response is a failure.

The client does not retry. Failures are raised as DeliveryError subclasses
and it is up to the caller to deliver the message unit again; the encoding
is deterministic so replaying a delivery sends identical requests.

Example:
    >>> from hb2b_rest.transport.client import DeliveryClient
    >>>
    >>> client = DeliveryClient("http://backend.example.com/hb2b", timeout_ms=5000)
    >>> client.deliver(user_message)
    >>>
    >>> # Configured from delivery method parameters
    >>> client = DeliveryClient.from_settings({"URL": "http://backend.example.com/hb2b"})
"""

from __future__ import annotations

import os
import time
from collections.abc import Iterator, Mapping
from typing import Any, BinaryIO
from urllib.parse import urlparse

import httpx

from hb2b_rest.errors import ConfigurationError, PreconditionError, TransportError
from hb2b_rest.models.constants import (
    DEFAULT_TIMEOUT_MS,
    P_BACKEND_URL,
    P_TIMEOUT,
    PAYLOAD_CHUNK_SIZE,
)
from hb2b_rest.models.entities import Payload
from hb2b_rest.models.message_units import MessageUnit, UserMessage
from hb2b_rest.observability import get_logger, get_metrics, log_context
from hb2b_rest.protocol.headers import HeaderBag
from hb2b_rest.protocol.mapping import headers_for, kind_name, single_payload, target_path
from hb2b_rest.utils.sanitization import sanitize_url

# Module logger
logger = get_logger(__name__)


def _read_chunks(source: BinaryIO, chunk_size: int = PAYLOAD_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the content of the source as is, in chunks."""
    while chunk := source.read(chunk_size):
        yield chunk


def _record_result(kind: str, status: str, start_time: float | None = None) -> None:
    metrics = get_metrics()
    metrics.increment_counter("hb2b_deliveries_total", {"kind": kind, "status": status})
    if start_time is not None:
        metrics.observe_histogram(
            "hb2b_delivery_duration_seconds",
            time.perf_counter() - start_time,
            {"kind": kind, "status": status},
        )


def _record_error(kind: str, reason: str) -> None:
    get_metrics().increment_counter("hb2b_delivery_errors_total", {"kind": kind, "reason": reason})


class DeliveryClient:
    """Delivers User Messages and notifies Signals to the back-end.

    The client only holds its configuration, which is set at construction
    and never changed, so one instance can serve concurrent deliveries from
    multiple threads. Every delivery uses its own headers and connection.

    Attributes:
        base_url: Base URL of the back-end, always ending with "/"
        timeout_ms: Time in milliseconds to wait for connecting to the back-end
            and for its response

    Example:
        >>> client = DeliveryClient("http://localhost:8080/backend")
        >>> client.url_for(receipt)
        'http://localhost:8080/backend/notify/receipt'
    """

    def __init__(
        self,
        base_url: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the delivery client.

        Args:
            base_url: URL where the back-end REST service is hosted
            timeout_ms: Connect and response timeout in milliseconds (default: 10000)
            transport: Optional custom transport (for testing), e.g. httpx.MockTransport

        Raises:
            ConfigurationError: If the URL is not an absolute http(s) URL without
                query or fragment, or the timeout is not a positive number
        """
        if not isinstance(base_url, str) or not base_url:
            logger.critical("hb2b.delivery.invalid_url", url=base_url)
            raise ConfigurationError(P_BACKEND_URL, base_url, "a URL is required")
        try:
            parsed = urlparse(base_url)
        except ValueError as exc:
            logger.critical("hb2b.delivery.invalid_url", url=sanitize_url(base_url))
            raise ConfigurationError(P_BACKEND_URL, base_url, str(exc)) from exc
        if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
            logger.critical("hb2b.delivery.invalid_url", url=sanitize_url(base_url))
            raise ConfigurationError(
                P_BACKEND_URL, base_url, "must be an absolute http or https URL"
            )
        if parsed.query or parsed.fragment:
            logger.critical("hb2b.delivery.invalid_url", url=sanitize_url(base_url))
            raise ConfigurationError(
                P_BACKEND_URL, base_url, "must not contain a query or fragment"
            )
        if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms <= 0:
            raise ConfigurationError(P_TIMEOUT, timeout_ms, "must be a positive number of ms")

        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._timeout_ms = timeout_ms
        self._transport = transport

        logger.info(
            "hb2b.delivery.initialised",
            base_url=sanitize_url(self._base_url),
            timeout_ms=self._timeout_ms,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Mapping[str, Any],
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> DeliveryClient:
        """Create a client from delivery method parameters.

        Args:
            settings: Mapping with the required "URL" and optional "TIMEOUT" (ms)
                parameters. A TIMEOUT that is not a number is ignored and the
                default of 10 seconds is used.
            transport: Optional custom transport (for testing)

        Raises:
            ConfigurationError: If the URL is missing or malformed
        """
        timeout = settings.get(P_TIMEOUT)
        try:
            timeout_ms = int(timeout) if timeout is not None else DEFAULT_TIMEOUT_MS
        except (TypeError, ValueError):
            logger.warning("hb2b.delivery.invalid_timeout", timeout=timeout)
            timeout_ms = DEFAULT_TIMEOUT_MS
        return cls(settings.get(P_BACKEND_URL), timeout_ms, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    def url_for(self, message_unit: MessageUnit) -> str:
        """Full URL of the back-end operation for the message unit."""
        return self._base_url + target_path(message_unit)

    def deliver(self, message_unit: MessageUnit) -> None:
        """Deliver a User Message or notify a Signal to the back-end.

        Blocks until the back-end responds or the timeout elapses.

        Args:
            message_unit: The UserMessage, Receipt or ErrorMessage to send

        Raises:
            PreconditionError: If the message unit cannot be sent; nothing is sent
            TransportError: If the back-end did not respond with a 2xx status code
        """
        with log_context(
            message_id=message_unit.message_id, message_unit=kind_name(message_unit)
        ):
            self._send(message_unit)

    def _send(self, message_unit: MessageUnit) -> None:
        kind = message_unit.kind

        try:
            headers = headers_for(message_unit)
            payload = self._payload_of(message_unit)
        except PreconditionError as exc:
            logger.critical("hb2b.delivery.precondition_failed", reason=exc.reason)
            _record_error(kind, "precondition")
            _record_result(kind, "error")
            raise

        url = self.url_for(message_unit)
        operation = "delivery" if isinstance(message_unit, UserMessage) else "notification"
        logger.debug(
            "hb2b.delivery.sending",
            url=sanitize_url(url),
            header_count=len(headers),
            has_payload=payload is not None,
        )

        start_time = time.perf_counter()
        try:
            response = self._post(url, headers, payload)
        except httpx.TimeoutException as exc:
            logger.error("hb2b.delivery.failed", url=sanitize_url(url), error="timeout")
            _record_error(kind, "timeout")
            _record_result(kind, "error", start_time)
            raise TransportError(
                f"Error in {operation} to back-end: no response within {self._timeout_ms} ms",
                url=url,
                reason=f"Timeout after {self._timeout_ms} ms: {exc}",
                cause=exc,
                message_id=message_unit.message_id,
            ) from exc
        except (httpx.HTTPError, OSError) as exc:
            logger.error("hb2b.delivery.failed", url=sanitize_url(url), error=str(exc))
            _record_error(kind, "io")
            _record_result(kind, "error", start_time)
            raise TransportError(
                f"Error in {operation} to back-end: {exc}",
                url=url,
                reason=str(exc) or type(exc).__name__,
                cause=exc,
                message_id=message_unit.message_id,
            ) from exc

        status_code = response.status_code
        if not 200 <= status_code < 300:
            logger.error(
                "hb2b.delivery.rejected",
                url=sanitize_url(url),
                status_code=status_code,
                reason=response.reason_phrase,
            )
            _record_error(kind, "http_status")
            _record_result(kind, "error", start_time)
            raise TransportError(
                f"Back-end refused {operation}! HTTP error= {status_code}/{response.reason_phrase}",
                url=url,
                status_code=status_code,
                reason=response.reason_phrase,
                message_id=message_unit.message_id,
            )

        _record_result(kind, "success", start_time)
        logger.info("hb2b.delivery.succeeded", url=sanitize_url(url), status_code=status_code)

    @staticmethod
    def _payload_of(message_unit: MessageUnit) -> Payload | None:
        if not isinstance(message_unit, UserMessage):
            return None
        payload = single_payload(message_unit)
        if payload is not None and payload.content_location is None:
            raise PreconditionError(
                "Payload content is not available", message_id=message_unit.message_id
            )
        return payload

    def _post(self, url: str, headers: HeaderBag, payload: Payload | None) -> httpx.Response:
        """POST the headers and the payload content, if any, to the URL."""
        request_headers = headers.to_dict()
        timeout = httpx.Timeout(self._timeout_ms / 1000)
        with httpx.Client(transport=self._transport, timeout=timeout) as client:
            if payload is None:
                request_headers["content-length"] = "0"
                return client.post(url, content=b"", headers=request_headers)

            # Opened only now so the file is held for the duration of the exchange
            with open(payload.content_location, "rb") as source:
                request_headers["content-length"] = str(os.fstat(source.fileno()).st_size)
                return client.post(url, content=_read_chunks(source), headers=request_headers)
