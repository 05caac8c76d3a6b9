"""Wallet endpoints - Where a chosen wallet picks up its request and answers"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Form, HTTPException
from returns.result import Failure

from wallet_selector.adapter.output.deferred import DeferredWalletInvocationChannel, NotPending
from wallet_selector.api.dependencies import get_wallet_invocation
from wallet_selector.api.models import ErrorResponseModel

router = APIRouter(prefix="/wallet", tags=["Wallet"])


def _not_found(correlation_id: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail=ErrorResponseModel(
            error="invocation_not_found", error_description=f"No wallet invocation pending for {correlation_id}"
        ).model_dump(),
    )


@router.get(
    "/invocations/{correlation_id}",
    summary="Get a pending wallet invocation",
    description="The authorization URL the chosen wallet should open",
    responses={404: {"model": ErrorResponseModel}},
)
async def get_invocation(
    correlation_id: str,
    invocation: DeferredWalletInvocationChannel = Depends(get_wallet_invocation),
) -> Dict[str, Any]:
    pending = invocation.get_pending(correlation_id)
    if pending is None:
        raise _not_found(correlation_id)
    return pending.to_dict()


@router.post(
    "/response/{correlation_id}",
    summary="Submit wallet response",
    description="Wallet posts its protocol response (application/x-www-form-urlencoded)",
    responses={400: {"model": ErrorResponseModel}, 403: {"model": ErrorResponseModel}, 404: {"model": ErrorResponseModel}},
)
async def post_wallet_response(
    correlation_id: str,
    response: str = Form(..., description="Protocol response (JSON)"),
    origin: Optional[str] = Form(None, description="Origin of the responding wallet"),
    invocation: DeferredWalletInvocationChannel = Depends(get_wallet_invocation),
) -> Dict[str, Any]:
    """
    Hand the wallet's response to the waiting request.

    The response is validated by the protocol plugin on the caller side;
    here it only needs to be JSON.
    """
    try:
        payload = json.loads(response)
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail=ErrorResponseModel(error="invalid_request", error_description=f"Invalid response JSON: {e}").model_dump(),
        )

    result = invocation.deliver_response(correlation_id, payload, origin=origin)
    if isinstance(result, Failure):
        error = result.failure()
        if isinstance(error, NotPending):
            raise _not_found(correlation_id)
        raise HTTPException(
            status_code=403,
            detail=ErrorResponseModel(error="origin_mismatch", error_description=str(error)).model_dump(),
        )
    return {"status": "accepted", "correlation_id": correlation_id}


@router.post(
    "/native/{correlation_id}",
    summary="Hand the request back to the native path",
    responses={404: {"model": ErrorResponseModel}},
)
async def post_native_fallback(
    correlation_id: str,
    invocation: DeferredWalletInvocationChannel = Depends(get_wallet_invocation),
) -> Dict[str, Any]:
    if isinstance(invocation.fallback_to_native(correlation_id), Failure):
        raise _not_found(correlation_id)
    return {"status": "native", "correlation_id": correlation_id}


@router.post(
    "/cancel/{correlation_id}",
    summary="Abandon the wallet round trip",
    responses={404: {"model": ErrorResponseModel}},
)
async def post_wallet_cancel(
    correlation_id: str,
    invocation: DeferredWalletInvocationChannel = Depends(get_wallet_invocation),
) -> Dict[str, Any]:
    if isinstance(invocation.cancel(correlation_id), Failure):
        raise _not_found(correlation_id)
    return {"status": "cancelled", "correlation_id": correlation_id}
