"""Envelope Route — interception stage that normalizes and wraps every handler result.

Invariants:
    - Every endpoint on an EnvelopeRoute router returns the standard envelope
      with status = the route's declared status_code (default 200)
    - Handler results pass through safe_normalize before wrapping (never fails
      a successful response)
    - Pydantic models, nested ones included, are dumped by alias before normalization
    - When normalization falls back to the raw tree, the body is still rendered:
      leftover ObjectId, datetime, binary and Decimal128 leaves get their JSON form
    - A handler that returns a Response, or is marked with skip_envelope,
      is written untouched
    - 204 and 304 responses carry no body (HTTP forbids one)

Design Decisions:
    - Endpoint wrapping over middleware: the handler's raw value is intercepted
      before FastAPI's jsonable_encoder, which cannot encode ObjectId
    - The wrapper declares an extra keyword-only Request parameter so FastAPI
      injects the request; the original endpoint never sees it
"""

import inspect
import json
import logging
from collections.abc import Mapping
from typing import Any, Callable, get_type_hints

from fastapi import Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from pydantic import BaseModel

from app.config import get_settings
from app.core.envelope import build_success_envelope
from app.core.normalize import json_default, safe_normalize

logger = logging.getLogger(__name__)

SKIP_ENVELOPE_ATTR = "__skip_envelope__"
ENVELOPED_ATTR = "__enveloped__"
NO_BODY_STATUS_CODES = frozenset({204, 304})
_REQUEST_PARAM = "envelope_request__"


def skip_envelope(endpoint: Callable) -> Callable:
    """Mark an endpoint whose return value is written without an envelope."""
    setattr(endpoint, SKIP_ENVELOPE_ATTR, True)
    return endpoint


class EnvelopeJSONResponse(JSONResponse):
    """JSONResponse that renders store-native leaves left in a raw tree."""

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
            default=json_default,
        ).encode("utf-8")


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def envelope_response(
    result: Any, status_code: int, method: str, max_depth: int,
) -> Response:
    """Normalize a handler result and write it as an enveloped JSON response."""
    data = safe_normalize(_plain(result), max_depth=max_depth)
    envelope = build_success_envelope(data, status_code, method)
    if status_code in NO_BODY_STATUS_CODES:
        logger.debug(
            f"{envelope['status']}: {envelope['message']}",
            extra={"method": method, "status_code": status_code},
        )
        return Response(status_code=status_code)
    return EnvelopeJSONResponse(status_code=status_code, content=envelope)


def _wrapper_signature(endpoint: Callable) -> inspect.Signature:
    signature = inspect.signature(endpoint)
    hints = get_type_hints(endpoint, include_extras=True)
    params = [
        p.replace(annotation=hints.get(p.name, p.annotation))
        for p in signature.parameters.values()
    ]
    params.append(inspect.Parameter(
        _REQUEST_PARAM, inspect.Parameter.KEYWORD_ONLY, annotation=Request,
    ))
    return signature.replace(
        parameters=params, return_annotation=inspect.Signature.empty,
    )


def envelope_endpoint(endpoint: Callable, status_code: int) -> Callable:
    """Wrap an endpoint so its result leaves as an envelope."""
    is_coroutine = inspect.iscoroutinefunction(endpoint)

    async def wrapper(*args, **kwargs):
        request: Request = kwargs.pop(_REQUEST_PARAM)
        if is_coroutine:
            result = await endpoint(*args, **kwargs)
        else:
            result = await run_in_threadpool(endpoint, *args, **kwargs)
        if isinstance(result, Response):
            return result
        return envelope_response(
            result, status_code, request.method,
            get_settings().normalize_max_depth,
        )

    # no __wrapped__: FastAPI must inspect the wrapper, not the original
    for attr in ("__module__", "__name__", "__qualname__", "__doc__"):
        setattr(wrapper, attr, getattr(endpoint, attr, None))
    wrapper.__signature__ = _wrapper_signature(endpoint)
    setattr(wrapper, ENVELOPED_ATTR, True)
    return wrapper


class EnvelopeRoute(APIRoute):
    """APIRoute whose endpoint is wrapped by envelope_endpoint."""

    def __init__(
        self,
        path: str,
        endpoint: Callable[..., Any],
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ):
        # include_router rebuilds routes from the already-wrapped endpoint
        if not (
            getattr(endpoint, SKIP_ENVELOPE_ATTR, False)
            or getattr(endpoint, ENVELOPED_ATTR, False)
        ):
            endpoint = envelope_endpoint(endpoint, status_code or 200)
        super().__init__(path, endpoint, status_code=status_code, **kwargs)
