"""JOSE adapters"""

from wallet_selector.adapter.output.jose.joserfc_verifier import JoserfcJwtVerifier

__all__ = ["JoserfcJwtVerifier"]
