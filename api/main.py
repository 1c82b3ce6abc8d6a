"""
FastAPI application for the transaction notification gateway.

Endpoints:
1. POST /v1/transactions          process one transaction, notify synchronously
2. POST /v1/transactions/batch    register a batch, notify fire-and-forget (202)
3. GET  /v1/transactions/status/{id}  delivery status of a dispatched transaction

Run with:
    uv run uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import logging
import threading
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from api.schemas import TransactionRequest, TransactionResponse, TransactionStatusResponse
from domain.exceptions import BusinessError
from gateway.config import get_settings
from gateway.container import Gateway, build_gateway
from notify.exceptions import NotificationError, NotificationValidationError, ProviderError

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("api")

# Module-level gateway (replaceable in tests via reset_gateway)
_gateway: Optional[Gateway] = None
_gateway_lock = threading.Lock()


def get_gateway() -> Gateway:
    """Get the process-wide gateway, building it on first use."""
    global _gateway
    if _gateway is None:
        with _gateway_lock:
            if _gateway is None:
                _gateway = build_gateway()
    return _gateway


def reset_gateway(gateway: Optional[Gateway] = None) -> None:
    """Replace the process-wide gateway (for testing)."""
    global _gateway
    with _gateway_lock:
        _gateway = gateway


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logging.info("Starting Transaction Notification Gateway")
    get_gateway()
    yield
    logging.info("Shutting down")
    if _gateway is not None:
        _gateway.shutdown(wait=True)
        reset_gateway(None)


app = FastAPI(
    title="Transaction Notification Gateway",
    description="""
    Processes financial transactions and routes customer notifications.

    ## Channels

    - **COMPLETED** transactions are notified by email
    - **PENDING** transactions are notified by push
    - **REJECTED** transactions are notified by SMS

    Batches are always notified by push, fire-and-forget. Poll
    `/v1/transactions/status/{id}` for the final delivery status.
    """,
    version="1.0.0",
    lifespan=lifespan,
)


# =============================================================================
# Error Handling
# =============================================================================

def _problem(status_code: int, title: str, problem_type: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        media_type="application/problem+json",
        content={
            "type": f"urn:problem:{problem_type}",
            "title": title,
            "status": status_code,
            "detail": detail,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


@app.exception_handler(NotificationValidationError)
async def handle_validation_error(request: Request, exc: NotificationValidationError) -> JSONResponse:
    logger.error(f"Validation error on {request.url.path}: {exc}", exc_info=exc)
    return _problem(status.HTTP_400_BAD_REQUEST, "Validation Error", "validation-error", str(exc))


@app.exception_handler(ProviderError)
async def handle_provider_error(request: Request, exc: ProviderError) -> JSONResponse:
    logger.error(f"Provider error on {request.url.path}: {exc}", exc_info=exc)
    return _problem(status.HTTP_503_SERVICE_UNAVAILABLE, "Provider Error", "provider-error", str(exc))


@app.exception_handler(NotificationError)
async def handle_notification_error(request: Request, exc: NotificationError) -> JSONResponse:
    logger.error(f"Notification error on {request.url.path}: {exc}", exc_info=exc)
    return _problem(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Notification Error",
        "notification-error",
        str(exc),
    )


@app.exception_handler(BusinessError)
async def handle_business_error(request: Request, exc: BusinessError) -> JSONResponse:
    logger.error(f"Business error on {request.url.path}: {exc}", exc_info=exc)
    return _problem(status.HTTP_500_INTERNAL_SERVER_ERROR, "Business Error", "business-error", str(exc))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected error on {request.url.path}", exc_info=exc)
    return _problem(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "internal-server-error",
        "An unexpected error occurred",
    )


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "transaction-notification-gateway"}


# =============================================================================
# Transactions
# =============================================================================

@app.post("/v1/transactions", response_model=TransactionResponse, tags=["Transactions"])
def process_transaction(
    request: TransactionRequest,
    gateway: Gateway = Depends(get_gateway),
) -> TransactionResponse:
    """
    Process a transaction and notify the customer.

    The channel follows the business status. The call waits for the
    provider, so the response carries the final notification outcome.
    """
    result = gateway.process(request.to_domain())
    return TransactionResponse.from_result(result)


@app.post(
    "/v1/transactions/batch",
    response_model=list[str],
    status_code=status.HTTP_202_ACCEPTED,
    tags=["Transactions"],
)
def process_batch(
    requests: list[TransactionRequest],
    gateway: Gateway = Depends(get_gateway),
) -> list[str]:
    """
    Register a batch of transactions and notify by push in the background.

    Returns the transaction ids immediately; each one starts as PROCESSING.
    """
    return gateway.process_batch([r.to_domain() for r in requests])


@app.get(
    "/v1/transactions/status/{transaction_id}",
    response_model=TransactionStatusResponse,
    tags=["Transactions"],
)
def get_status(
    transaction_id: str,
    gateway: Gateway = Depends(get_gateway),
) -> TransactionStatusResponse:
    """Look up the delivery status of a dispatched transaction."""
    record = gateway.get_status(transaction_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Transaction not found: {transaction_id}")
    return TransactionStatusResponse.from_record(record)
