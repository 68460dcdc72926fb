"""GeminiProvider adapter (Gemini API and Vertex AI over REST).

Talks to ``generateContent`` / ``streamGenerateContent?alt=sse`` directly with
the pooled ``httpx`` client; no Google SDK is involved.

Authentication:
    - ``access_token`` (OAuth bearer, typical for Vertex AI) is sent as an
      ``Authorization`` header and takes precedence.
    - Otherwise ``api_key`` is sent as the ``key`` query parameter.
    - With neither, calls fail with an ``auth`` error before any I/O.

Endpoint:
    ``project_id`` selects Vertex AI in ``region`` (default ``us-central1``);
    without it the Gemini API host is used. See :mod:`.endpoints`.
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
from ..config.defaults import GEMINI_DEFAULT_MODEL, VERTEX_DEFAULT_REGION
from .decode import GeminiStreamDecoder, decode_model_ids, decode_response
from .encode import encode_request
from .endpoints import build_endpoint, models_url

GEMINI_MODELS = (
    "gemini-2.5-pro",
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-3-pro-preview",
    "gemini-3-flash-preview",
)


class GeminiProvider(ProviderCallLogMixin):
    """Adapter for Google's ``generateContent`` API family."""

    def __init__(
        self,
        name: str = "google",
        api_key: Optional[str] = None,
        *,
        project_id: Optional[str] = None,
        region: Optional[str] = None,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._name = name
        self._api_key = api_key
        self._project_id = project_id
        self._region = region or VERTEX_DEFAULT_REGION
        self._access_token = access_token
        self._base_url = base_url
        self._default_model = default_model or GEMINI_DEFAULT_MODEL
        self._client = client
        self._models: List[str] = list(GEMINI_MODELS)
        self._logger = get_logger(f"dcode_providers.gemini.{name}")

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def uses_vertex(self) -> bool:
        return bool(self._project_id)

    def list_models(self, refresh: bool = False) -> List[str]:
        """Return known models; ``refresh`` queries the Gemini API host.

        Vertex AI has no equivalent listing for publisher models, so refresh
        is a no-op there.
        """
        if refresh and not self.uses_vertex:
            self._models = self._fetch_models()
        return list(self._models)

    def create_message(
        self,
        request: MessageRequest,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> MessageResponse:
        ctx = LogContext(provider=self._name, model=request.model)
        started = self._log_call_start("chat", ctx, request)
        try:
            self._require_credentials(request.model)
            endpoint = build_endpoint(
                request.model,
                project_id=self._project_id,
                region=self._region,
                base_url=self._base_url,
            )
            with open_exchange(
                self._http(),
                "POST",
                endpoint.url,
                provider=self._name,
                model=request.model,
                json=encode_request(request, logger=self._logger),
                headers=self._headers(),
                params=self._params(endpoint.params),
                cancel=cancel,
            ) as response:
                raw = response.read()
            if cancel is not None:
                cancel.raise_if_cancelled()
            result = decode_response(raw, model=request.model)
        except Exception as exc:
            err = as_provider_failure(exc, provider=self._name, model=request.model, cancel=cancel)
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
        ctx = LogContext(provider=self._name, model=request.model)
        started = self._log_call_start("stream", ctx, request)
        decoder = GeminiStreamDecoder(self._logger, ctx)
        emitted = deliver_chunks(self._iter_chunks(request, decoder, ctx, cancel), callback)
        ctx.response_id = decoder.response_id
        self._log_call_end("stream", ctx, started, usage=decoder.usage, emitted=emitted)

    def _iter_chunks(
        self,
        request: MessageRequest,
        decoder: GeminiStreamDecoder,
        ctx: LogContext,
        cancel: Optional[CancellationToken],
    ) -> Iterator[Any]:
        try:
            self._require_credentials(request.model)
            endpoint = build_endpoint(
                request.model,
                stream=True,
                project_id=self._project_id,
                region=self._region,
                base_url=self._base_url,
            )
            with open_exchange(
                self._http(),
                "POST",
                endpoint.url,
                provider=self._name,
                model=request.model,
                json=encode_request(request, logger=self._logger),
                headers={**self._headers(), "Accept": "text/event-stream"},
                params=self._params(endpoint.params),
                cancel=cancel,
            ) as response:
                for payload in iter_sse_data(iter_response_lines(response, cancel)):
                    yield from decoder.feed(payload)
            yield from decoder.finish()
        except Exception as exc:
            err = as_provider_failure(exc, provider=self._name, model=request.model, cancel=cancel)
            self._log_call_error("stream", ctx, err)
            if err is exc:
                raise
            raise err from exc

    def _fetch_models(self) -> List[str]:
        ctx = LogContext(provider=self._name, operation="models")
        try:
            self._require_credentials(None)
            with open_exchange(
                self._http("models"),
                "GET",
                models_url(self._base_url),
                provider=self._name,
                headers=self._headers(),
                params=self._params({"pageSize": "1000"}),
            ) as response:
                ids = decode_model_ids(response.read())
        except Exception as exc:
            err = as_provider_failure(exc, provider=self._name)
            self._log_call_error("models", ctx, err)
            if err is exc:
                raise
            raise err from exc
        normalized_log_event(self._logger, "models.refresh", ctx, phase="finalize", emitted=len(ids))
        return ids

    def _require_credentials(self, model: Optional[str]) -> None:
        if not self._access_token and not self._api_key:
            hint = "GOOGLE_ACCESS_TOKEN or GOOGLE_VERTEX_API_KEY" if self.uses_vertex else "GOOGLE_API_KEY or GEMINI_API_KEY"
            raise ClassifiedError(
                kind=ErrorKind.AUTH,
                message=f"no credentials configured for {self._name}; set {hint}",
                provider=self._name,
                model=model,
            )

    def _headers(self) -> Dict[str, str]:
        if self._access_token:
            return {"Authorization": f"Bearer {self._access_token}"}
        return {}

    def _params(self, base: Dict[str, str]) -> Dict[str, str]:
        params = dict(base)
        if not self._access_token and self._api_key:
            params["key"] = self._api_key
        return params

    def _http(self, purpose: str = "chat") -> httpx.Client:
        return self._client or get_httpx_client(None, f"gemini-{purpose}")


__all__ = ["GeminiProvider", "GEMINI_MODELS"]
