"""HTTP client with retries and timeouts for published JSON datasets."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Any

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from micoteca.common.constants import USER_AGENT
from micoteca.common.errors import DatasetError

RETRYABLE_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 20.0
    read: float = 120.0


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 5
    multiplier: float = 1.0
    max_wait: float = 30.0


class HttpRequestError(DatasetError):
    error_code = "HTTP_ERROR"


class RetryableHttpError(HttpRequestError):
    pass


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.session = requests.Session()

    @classmethod
    def from_config(cls, http_config: dict) -> "HttpClient":
        return cls(
            timeout=TimeoutConfig(
                connect=float(http_config["connect_timeout"]),
                read=float(http_config["read_timeout"]),
            ),
            retry=RetryConfig(max_attempts=int(http_config["max_attempts"])),
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        out = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if headers:
            out.update(headers)
        return out

    def _raise_for_status_or_retry(self, response: requests.Response) -> None:
        status = response.status_code
        if status in RETRYABLE_STATUS_CODES:
            raise RetryableHttpError(f"Retryable HTTP status: {status}")
        if status >= 400:
            raise HttpRequestError(f"HTTP status: {status}")

    def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
        timeout: TimeoutConfig | None,
    ) -> Any:
        req_timeout = timeout or self.timeout
        try:
            response = self.session.request(
                method="GET",
                url=url,
                params=params,
                headers=self._headers(headers),
                timeout=(req_timeout.connect, req_timeout.read),
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise RetryableHttpError(f"Transport failure for {url}: {exc}") from exc
        self._raise_for_status_or_retry(response)

        try:
            return response.json()
        except ValueError as exc:
            raise HttpRequestError(f"Invalid JSON payload from {url}") from exc

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> Any:
        @retry(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry.multiplier,
                max=self.retry.max_wait,
                jitter=1.0,
            ),
            retry=retry_if_exception_type(RetryableHttpError),
            reraise=True,
        )
        def _wrapped() -> Any:
            return self._get_json(url, params=params, headers=headers, timeout=timeout)

        return _wrapped()
