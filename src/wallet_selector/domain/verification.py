"""JWT verification request/result types exchanged with verification delegates"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from wallet_selector.domain.errors import MalformedVerifierResult


@dataclass(frozen=True)
class JwtVerificationOptions:
    """
    Hints handed to a verification delegate alongside the token.

    Attributes:
        certificate: First certificate of the token's x5c header (base64 DER)
        algorithm: Declared signing algorithm (``alg`` header)
        kid: Declared key identifier (``kid`` header)
    """

    certificate: Optional[str] = None
    algorithm: Optional[str] = None
    kid: Optional[str] = None

    @classmethod
    def from_header(cls, header: Mapping[str, Any]) -> "JwtVerificationOptions":
        x5c = header.get("x5c")
        certificate = x5c[0] if isinstance(x5c, list) and x5c else None
        return cls(certificate=certificate, algorithm=header.get("alg"), kid=header.get("kid"))

    def as_dict(self) -> Dict[str, Any]:
        return {"certificate": self.certificate, "algorithm": self.algorithm, "kid": self.kid}


@dataclass(frozen=True)
class JwtVerificationResult:
    """Outcome reported by a verification delegate"""

    valid: bool
    payload: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "JwtVerificationResult":
        return cls(valid=False, error=error)


def parse_verifier_result(raw: Any) -> JwtVerificationResult:
    """
    Interpret a delegate's return value.

    Accepts a JwtVerificationResult or any mapping carrying a boolean
    ``valid`` field.

    Raises:
        MalformedVerifierResult: When ``valid`` is missing or not a boolean
    """
    if isinstance(raw, JwtVerificationResult):
        return raw
    if isinstance(raw, Mapping) and isinstance(raw.get("valid"), bool):
        error = raw.get("error")
        return JwtVerificationResult(
            valid=raw["valid"],
            payload=raw.get("payload"),
            error=str(error) if error is not None else None,
        )
    raise MalformedVerifierResult()
