"""Caller-facing credential endpoints"""

from fastapi import APIRouter, Depends, HTTPException

from wallet_selector.api.dependencies import get_boundary
from wallet_selector.api.models import (
    CredentialGetRequestModel,
    CredentialGetResponseModel,
    ErrorResponseModel,
    ProtocolsResponseModel,
)
from wallet_selector.application import InterceptionBoundary
from wallet_selector.domain import (
    DigitalCredential,
    InvalidResponse,
    RequestAborted,
    Timeout,
    UserCancelled,
    WalletSelectorError,
)

router = APIRouter(tags=["Credentials"])


def _error(status_code: int, error: str, description: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponseModel(error=error, error_description=description).model_dump(),
    )


@router.get(
    "/protocols",
    summary="Supported protocols",
    description="Protocols offered by enabled wallets, as cached by the interception boundary",
    response_model=ProtocolsResponseModel,
)
async def get_protocols(
    refresh: bool = False,
    boundary: InterceptionBoundary = Depends(get_boundary),
) -> ProtocolsResponseModel:
    """Get the supported-protocol cache, optionally refreshing it first"""
    protocols = await boundary.refresh_supported_protocols() if refresh else boundary.supported_protocols
    return ProtocolsResponseModel(protocols=protocols, plugins=boundary.registry.supported_protocols())


@router.post(
    "/credentials/get",
    summary="Request a credential",
    description="Broker a credential request to a user-chosen wallet, or hand it back to the native path",
    response_model=CredentialGetResponseModel,
    responses={
        409: {"model": ErrorResponseModel},
        502: {"model": ErrorResponseModel},
        504: {"model": ErrorResponseModel},
    },
)
async def get_credential(
    request: CredentialGetRequestModel,
    boundary: InterceptionBoundary = Depends(get_boundary),
) -> CredentialGetResponseModel:
    """
    Request a credential.

    Blocks until the request settles: the coordinator falls back to native,
    the user and wallet complete the round trip, or the request fails.
    """
    try:
        result = await boundary.get(request.options)
    except Timeout as e:
        raise _error(504, "timeout", str(e))
    except UserCancelled as e:
        raise _error(409, "cancelled", str(e))
    except InvalidResponse as e:
        raise _error(502, "invalid_response", str(e))
    except RequestAborted as e:
        raise _error(502, "aborted", str(e))
    except WalletSelectorError as e:
        raise _error(400, "invalid_request", str(e))

    if isinstance(result, DigitalCredential):
        return CredentialGetResponseModel(credential=result.to_json())
    return CredentialGetResponseModel(result=result)


@router.delete(
    "/credentials/{correlation_id}",
    summary="Cancel a credential request",
    responses={404: {"model": ErrorResponseModel}},
)
async def cancel_credential(
    correlation_id: str,
    boundary: InterceptionBoundary = Depends(get_boundary),
) -> dict:
    """Cancel a pending request; its caller receives a cancellation"""
    if not boundary.cancel(correlation_id):
        raise _error(404, "request_not_found", f"No pending request {correlation_id}")
    return {"cancelled": True, "correlation_id": correlation_id}
