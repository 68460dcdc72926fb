"""OpenAI-compatible provider adapter.

One implementation serves every backend speaking the Chat Completions wire
shape; the backend is chosen by the :class:`BackendProfile` passed in.

Call flow:
    - Blocking: encode -> ``POST {base}/chat/completions`` -> read body ->
      :func:`decode_response`.
    - Streaming: encode with ``stream: true`` -> read SSE lines ->
      :class:`OpenAIStreamDecoder` -> ``deliver_chunks`` into the caller's
      callback.

Failure semantics:
    - Nothing is retried. Non-2xx statuses, transport failures and malformed
      bodies surface as :class:`ClassifiedError`; cancellation surfaces as
      :class:`CancelledError`.
    - Each call logs ``<kind>.start`` and either ``<kind>.end`` or
      ``<kind>.error`` (``kind`` is ``chat`` or ``stream``).
    - A profile that requires a key refuses to call out without one.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.errors import ClassifiedError, ErrorKind
from ..base.http import as_provider_failure, get_httpx_client, iter_response_lines, open_exchange
from ..base.log_support import LogContext
from ..base.log_support.call_events import ProviderCallLogMixin
from ..base.logging import get_logger, normalized_log_event
from ..base.models import MessageRequest, MessageResponse
from ..base.streaming import StreamCallback, deliver_chunks, iter_sse_data
from ..config.env import get_env_var_name
from .decode import decode_model_ids, decode_response
from .encode import encode_request
from .profiles import BackendProfile
from .stream import OpenAIStreamDecoder


class OpenAICompatibleProvider(ProviderCallLogMixin):
    """Adapter for any Chat Completions backend described by a profile."""

    def __init__(
        self,
        profile: BackendProfile,
        api_key: Optional[str] = None,
        *,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._profile = profile
        self._api_key = api_key
        self._client = client
        self._models: List[str] = list(profile.models)
        self._logger = get_logger(f"dcode_providers.openai_compatible.{profile.name}")

    @property
    def provider_name(self) -> str:
        return self._profile.name

    @property
    def profile(self) -> BackendProfile:
        return self._profile

    @property
    def default_model(self) -> Optional[str]:
        return self._profile.default_model

    # -------------------- Provider protocol --------------------

    def list_models(self, refresh: bool = False) -> List[str]:
        """Return the model catalog; ``refresh`` re-reads ``GET {base}/models``."""
        if refresh:
            self._models = self._fetch_models()
        return list(self._models)

    def create_message(
        self,
        request: MessageRequest,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> MessageResponse:
        ctx = LogContext(provider=self.provider_name, model=request.model)
        started = self._log_call_start("chat", ctx, request)
        try:
            self._require_key(request.model)
            body = encode_request(request, stream=False)
            with open_exchange(
                self._http(),
                "POST",
                self._url("/chat/completions"),
                provider=self.provider_name,
                model=request.model,
                json=body,
                headers=self._headers(),
                cancel=cancel,
            ) as response:
                raw = response.read()
            if cancel is not None:
                cancel.raise_if_cancelled()
            result = decode_response(raw, model=request.model, logger=self._logger)
        except Exception as exc:
            err = self._failure(exc, request.model, cancel)
            self._log_call_error("chat", ctx, err)
            if err is exc:
                raise
            raise err from exc
        ctx.response_id = result.id or None
        self._log_call_end("chat", ctx, started, usage=result.usage, stop_reason=result.stop_reason)
        return result

    def stream_message(
        self,
        request: MessageRequest,
        callback: StreamCallback,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> None:
        ctx = LogContext(provider=self.provider_name, model=request.model)
        started = self._log_call_start("stream", ctx, request)
        decoder = OpenAIStreamDecoder(self._logger, ctx)
        emitted = deliver_chunks(self._iter_chunks(request, decoder, ctx, cancel), callback)
        ctx.response_id = decoder.response_id
        self._log_call_end("stream", ctx, started, usage=decoder.usage, emitted=emitted)

    # -------------------- Internals --------------------

    def _iter_chunks(
        self,
        request: MessageRequest,
        decoder: OpenAIStreamDecoder,
        ctx: LogContext,
        cancel: Optional[CancellationToken],
    ) -> Iterator[Any]:
        try:
            self._require_key(request.model)
            body = encode_request(request, stream=True, stream_usage=self._profile.stream_usage)
            headers = {**self._headers(), "Accept": "text/event-stream"}
            with open_exchange(
                self._http(),
                "POST",
                self._url("/chat/completions"),
                provider=self.provider_name,
                model=request.model,
                json=body,
                headers=headers,
                cancel=cancel,
            ) as response:
                for payload in iter_sse_data(iter_response_lines(response, cancel)):
                    yield from decoder.feed(payload)
            yield from decoder.finish()
        except Exception as exc:
            err = self._failure(exc, request.model, cancel)
            self._log_call_error("stream", ctx, err)
            if err is exc:
                raise
            raise err from exc

    def _fetch_models(self) -> List[str]:
        ctx = LogContext(provider=self.provider_name, operation="models")
        try:
            self._require_key(None)
            with open_exchange(
                self._http("models"),
                "GET",
                self._url("/models"),
                provider=self.provider_name,
                headers=self._headers(),
            ) as response:
                ids = decode_model_ids(response.read())
        except Exception as exc:
            err = self._failure(exc, None, None)
            self._log_call_error("models", ctx, err)
            if err is exc:
                raise
            raise err from exc
        normalized_log_event(self._logger, "models.refresh", ctx, phase="finalize", emitted=len(ids))
        return ids

    def _failure(
        self,
        exc: BaseException,
        model: Optional[str],
        cancel: Optional[CancellationToken],
    ) -> BaseException:
        return as_provider_failure(exc, provider=self.provider_name, model=model, cancel=cancel)

    def _require_key(self, model: Optional[str]) -> None:
        if self._profile.requires_key and not self._api_key:
            env = get_env_var_name(self.provider_name) or "the provider API key"
            raise ClassifiedError(
                kind=ErrorKind.AUTH,
                message=f"no API key configured for {self.provider_name}; set {env}",
                provider=self.provider_name,
                model=model,
            )

    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = dict(self._profile.headers)
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _http(self, purpose: str = "chat") -> httpx.Client:
        return self._client or get_httpx_client(self._profile.base_url, purpose)

    def _url(self, path: str) -> str:
        return self._profile.base_url.rstrip("/") + path


__all__ = ["OpenAICompatibleProvider"]
