"""API models - Request and response DTOs"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class CredentialGetRequestModel(BaseModel):
    """Caller's credential request"""

    options: Dict[str, Any] = Field(..., description="Credential request options, e.g. {digital: {requests: [...]}}")


class CredentialGetResponseModel(BaseModel):
    """Outcome of a credential request"""

    credential: Optional[Dict[str, Any]] = Field(None, description="Validated digital credential")
    result: Optional[Any] = Field(None, description="Native path result or unvalidated wallet response")


class ProtocolsResponseModel(BaseModel):
    """Protocols the broker can serve"""

    protocols: List[str] = Field(..., description="Protocols supported by enabled wallets")
    plugins: List[str] = Field(..., description="Protocols with a registered plugin")


class SelectionChoiceModel(BaseModel):
    """User's answer to a pending selection"""

    action: Literal["wallet", "native", "cancel"] = Field(..., description="What the user chose")
    wallet_id: Optional[str] = Field(None, description="Chosen wallet (action=wallet)")


class WalletRegistrationModel(BaseModel):
    """Wallet self-registration"""

    name: str = Field(..., min_length=1, description="Display name")
    url: str = Field(..., min_length=1, description="Wallet endpoint URL")
    protocols: List[str] = Field(..., min_length=1, description="Supported protocol identifiers")
    description: str = Field("", description="Optional description")


class WalletRegistrationResponseModel(BaseModel):
    """Result of a wallet self-registration"""

    success: bool = Field(..., description="Whether the wallet is now registered")
    already_registered: bool = Field(..., description="Whether the endpoint was already known")
    wallet: Dict[str, Any] = Field(..., description="Stored wallet")


class SettingsResponseModel(BaseModel):
    """Selector settings and usage statistics"""

    enabled: bool = Field(..., description="Global enable flag")
    stats: Dict[str, Any] = Field(..., description="Usage statistics")


class EnabledRequestModel(BaseModel):
    """Toggle of the global enable flag"""

    enabled: bool = Field(..., description="New value")


class ErrorResponseModel(BaseModel):
    """Standard error response"""

    error: str = Field(..., description="Error code")
    error_description: str = Field(..., description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
