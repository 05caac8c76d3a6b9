"""Wallet selection endpoints, answered by the user's selection UI"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from returns.result import Failure

from wallet_selector.adapter.output.deferred import DeferredSelectionSurface, NotPending
from wallet_selector.api.dependencies import get_selection_surface
from wallet_selector.api.models import ErrorResponseModel, SelectionChoiceModel

router = APIRouter(prefix="/selections", tags=["Selection"])


@router.get("", summary="Pending selections")
async def list_selections(
    selection: DeferredSelectionSurface = Depends(get_selection_surface),
) -> List[str]:
    return selection.pending()


@router.get(
    "/{correlation_id}",
    summary="Get a pending selection",
    description="Wallets offered for a request and the protocols it asks for",
    responses={404: {"model": ErrorResponseModel}},
)
async def get_selection(
    correlation_id: str,
    selection: DeferredSelectionSurface = Depends(get_selection_surface),
) -> Dict[str, Any]:
    pending = selection.get_pending(correlation_id)
    if pending is None:
        raise HTTPException(
            status_code=404,
            detail=ErrorResponseModel(
                error="selection_not_found", error_description=f"No pending selection {correlation_id}"
            ).model_dump(),
        )
    return pending.to_dict()


@router.post(
    "/{correlation_id}",
    summary="Answer a pending selection",
    responses={400: {"model": ErrorResponseModel}, 404: {"model": ErrorResponseModel}},
)
async def answer_selection(
    correlation_id: str,
    choice: SelectionChoiceModel,
    selection: DeferredSelectionSurface = Depends(get_selection_surface),
) -> Dict[str, Any]:
    """
    Answer with a wallet, the native path, or a cancellation.
    """
    if choice.action == "wallet":
        if not choice.wallet_id:
            raise HTTPException(
                status_code=400,
                detail=ErrorResponseModel(
                    error="invalid_request", error_description="wallet_id is required for action=wallet"
                ).model_dump(),
            )
        result = selection.choose_wallet(correlation_id, choice.wallet_id)
    elif choice.action == "native":
        result = selection.choose_native(correlation_id)
    else:
        result = selection.cancel(correlation_id)

    if isinstance(result, Failure):
        error = result.failure()
        status_code = 404 if isinstance(error, NotPending) else 400
        raise HTTPException(
            status_code=status_code,
            detail=ErrorResponseModel(
                error="selection_not_found" if status_code == 404 else "invalid_wallet",
                error_description=str(error),
            ).model_dump(),
        )
    return {"correlation_id": correlation_id, "action": choice.action}
