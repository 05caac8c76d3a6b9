"""Wallet management endpoints - Listing, self-registration and settings"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from returns.result import Failure

from wallet_selector.api.dependencies import get_boundary, get_clock, get_coordinator, get_wallet_store
from wallet_selector.api.models import (
    EnabledRequestModel,
    ErrorResponseModel,
    SettingsResponseModel,
    WalletRegistrationModel,
    WalletRegistrationResponseModel,
)
from wallet_selector.application import Coordinator, InterceptionBoundary
from wallet_selector.domain import Clock, WalletDescriptor, generate_wallet_id
from wallet_selector.port.output import WalletStore

router = APIRouter(tags=["Wallets"])


def _store_error(error: Exception) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail=ErrorResponseModel(error="internal_error", error_description=f"Wallet store error: {error}").model_dump(),
    )


@router.get("/wallets", summary="Configured wallets")
async def list_wallets(store: WalletStore = Depends(get_wallet_store)) -> List[Dict[str, Any]]:
    result = await store.get_wallets()
    if isinstance(result, Failure):
        raise _store_error(result.failure())
    return [wallet.model_dump(mode="json") for wallet in result.unwrap()]


@router.post(
    "/wallets/register",
    summary="Wallet self-registration",
    description="Register a wallet; wallets are de-duplicated by endpoint URL",
    response_model=WalletRegistrationResponseModel,
    responses={400: {"model": ErrorResponseModel}},
)
async def register_wallet(
    registration: WalletRegistrationModel,
    store: WalletStore = Depends(get_wallet_store),
    boundary: InterceptionBoundary = Depends(get_boundary),
    clock: Clock = Depends(get_clock),
) -> WalletRegistrationResponseModel:
    """
    Register a wallet.

    Protocol identifiers must contain only lowercase letters, digits, and
    hyphens. The supported-protocol cache is refreshed after a new wallet
    is added.
    """
    try:
        wallet = WalletDescriptor(
            id=generate_wallet_id(clock),
            name=registration.name,
            endpoint=registration.url,
            supported_protocols=frozenset(registration.protocols),
            description=registration.description,
            auto_registered=True,
            registered_at=clock.now(),
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=ErrorResponseModel(
                error="invalid_wallet",
                error_description="; ".join(error["msg"] for error in e.errors()),
            ).model_dump(),
        )

    result = await store.register_wallet(wallet)
    if isinstance(result, Failure):
        raise _store_error(result.failure())

    stored, already_registered = result.unwrap()
    if not already_registered:
        await boundary.refresh_supported_protocols()

    return WalletRegistrationResponseModel(
        success=True, already_registered=already_registered, wallet=stored.model_dump(mode="json")
    )


@router.get("/wallets/check", summary="Check whether a wallet endpoint is registered")
async def check_wallet(url: str, store: WalletStore = Depends(get_wallet_store)) -> Dict[str, bool]:
    result = await store.is_registered(url)
    if isinstance(result, Failure):
        raise _store_error(result.failure())
    return {"is_registered": result.unwrap()}


@router.get("/wallets/verifiers", summary="Wallet endpoints with a registered JWT verifier")
async def list_verifiers(coordinator: Coordinator = Depends(get_coordinator)) -> List[str]:
    return coordinator.verifiers.list_verifiers()


@router.get("/settings", summary="Settings and usage statistics", response_model=SettingsResponseModel)
async def get_settings(store: WalletStore = Depends(get_wallet_store)) -> SettingsResponseModel:
    enabled = await store.is_enabled()
    stats = await store.get_stats()
    if isinstance(enabled, Failure):
        raise _store_error(enabled.failure())
    if isinstance(stats, Failure):
        raise _store_error(stats.failure())
    return SettingsResponseModel(enabled=enabled.unwrap(), stats=stats.unwrap())


@router.post("/settings/enabled", summary="Toggle the wallet selector")
async def set_enabled(request: EnabledRequestModel, store: WalletStore = Depends(get_wallet_store)) -> Dict[str, bool]:
    result = await store.set_enabled(request.enabled)
    if isinstance(result, Failure):
        raise _store_error(result.failure())
    return {"success": True, "enabled": request.enabled}
