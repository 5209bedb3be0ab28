"""Translation of domain errors into HTTP problem details.

| Error                         | Status |
|-------------------------------|--------|
| NotConfiguredError            | 503    |
| ProofValidationError          | 400    |
| MalformedHashError            | 400    |
| RpcTimeoutError               | 500    |
| RpcFailureError / any other   | 500    |

500 responses carry the raw error message.
"""

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from baseproof.domain.errors import (
    MalformedHashError,
    NotConfiguredError,
    ProofValidationError,
    RpcFailureError,
    RpcTimeoutError,
)

logger = structlog.get_logger(__name__)

_URN = "urn:baseproof"


def _problem(request: Request, status: int, kind: str, title: str, detail: str) -> dict:
    return {
        "type": f"{_URN}:{kind}",
        "title": title,
        "status": status,
        "detail": detail,
        "instance": str(request.url),
    }


def to_http_exception(exc: Exception, request: Request) -> HTTPException:
    """Map an exception raised by the reader to an HTTPException."""
    if isinstance(exc, NotConfiguredError):
        return HTTPException(
            status_code=503,
            detail=_problem(request, 503, "registry:not-configured", "Not Configured", str(exc)),
        )
    if isinstance(exc, MalformedHashError):
        return HTTPException(
            status_code=400,
            detail=_problem(request, 400, "proof-type:malformed-hash", "Malformed Hash", str(exc)),
        )
    if isinstance(exc, ProofValidationError):
        return HTTPException(
            status_code=400,
            detail=_problem(request, 400, "request:invalid", "Invalid Request", str(exc)),
        )
    if isinstance(exc, RpcTimeoutError):
        kind, title = "rpc:timeout", "Upstream Timeout"
    elif isinstance(exc, RpcFailureError):
        kind, title = "rpc:failure", "Upstream Failure"
    else:
        kind, title = "internal", "Internal Error"
    logger.error("request_error", error_type=type(exc).__name__, error=str(exc))
    return HTTPException(status_code=500, detail=_problem(request, 500, kind, title, str(exc)))


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Request validation failed") if errors else "Request validation failed"
    body = _problem(request, 400, "request:invalid", "Invalid Request", str(message))
    logger.warning("validation_error", **body)
    return JSONResponse(status_code=400, content={"detail": body})


def install_error_handlers(app: FastAPI) -> None:
    """Report framework-level body validation failures as 400 problem details."""
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
