"""JwtVerifier implementation using joserfc"""

import base64
import logging
from typing import Any, Dict, Iterable, Optional

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, rsa
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from joserfc import jwt
from joserfc.jwk import ECKey, OKPKey, RSAKey

from wallet_selector.domain import JwtVerificationOptions, JwtVerificationResult
from wallet_selector.port.output import JwtVerifier

logger = logging.getLogger(__name__)


class JoserfcJwtVerifier(JwtVerifier):
    """
    Verifies JWS signatures with joserfc.

    The key is taken from the configured JWKS by ``kid`` (or the only key
    when there is just one). When ``trust_embedded_certificates`` is set and
    no configured key matches, the public key of the token's own x5c
    certificate is used; chain validation is then the caller's concern.
    """

    def __init__(self, jwks: Optional[Iterable[Dict[str, Any]]] = None, trust_embedded_certificates: bool = False):
        self.jwks = list(jwks or [])
        self.trust_embedded_certificates = trust_embedded_certificates

    async def verify(self, jwt_token: str, options: JwtVerificationOptions) -> JwtVerificationResult:
        """
        Verify a JWT signature and return its claims.

        Args:
            jwt_token: Compact JWS
            options: Header hints (certificate, algorithm, kid)

        Returns:
            JwtVerificationResult with the verified claims, or valid=False
        """
        if not options.algorithm or options.algorithm == "none":
            return JwtVerificationResult.failure("Missing or unsupported algorithm")

        try:
            key = self._select_key(options)
            if key is None:
                return JwtVerificationResult.failure("No verification key available")

            token = jwt.decode(jwt_token, key, algorithms=[options.algorithm])
            return JwtVerificationResult(valid=True, payload=dict(token.claims))

        except Exception as e:
            logger.info("JWT verification failed: %s", e)
            return JwtVerificationResult.failure(f"Failed to verify JWT: {e}")

    def _select_key(self, options: JwtVerificationOptions):
        if options.kid:
            for jwk_dict in self.jwks:
                if jwk_dict.get("kid") == options.kid:
                    return self._load_key(jwk_dict)
        elif len(self.jwks) == 1:
            return self._load_key(self.jwks[0])

        if self.trust_embedded_certificates and options.certificate:
            return self._load_certificate_key(options.certificate)
        return None

    def _load_certificate_key(self, certificate_b64: str):
        """
        Load the public key of a base64 DER certificate (an x5c entry).

        Raises:
            ValueError: If the key type is not supported
        """
        certificate = x509.load_der_x509_certificate(base64.b64decode(certificate_b64))
        public_key = certificate.public_key()
        pem = public_key.public_bytes(Encoding.PEM, PublicFormat.SubjectPublicKeyInfo)

        if isinstance(public_key, ec.EllipticCurvePublicKey):
            return ECKey.import_key(pem)
        elif isinstance(public_key, rsa.RSAPublicKey):
            return RSAKey.import_key(pem)
        elif isinstance(public_key, (ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)):
            return OKPKey.import_key(pem)
        else:
            raise ValueError(f"Unsupported certificate key type: {type(public_key).__name__}")

    def _load_key(self, jwk_dict: Dict[str, Any]):
        """
        Load a key from JWK dictionary.

        Raises:
            ValueError: If key type is not supported
        """
        kty = jwk_dict.get("kty")

        if kty == "EC":
            return ECKey.import_key(jwk_dict)
        elif kty == "RSA":
            return RSAKey.import_key(jwk_dict)
        elif kty == "OKP":
            return OKPKey.import_key(jwk_dict)
        else:
            raise ValueError(f"Unsupported key type: {kty}")
