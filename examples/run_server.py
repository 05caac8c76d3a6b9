"""
Run the Wallet Selector API server

This script starts the FastAPI server for the Wallet Selector.
Set WALLET_SELECTOR_WALLETS_FILE to load wallets from a JSON file.
"""

import logging

import uvicorn

from wallet_selector.api.app import app

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    print("=" * 60)
    print("Starting Wallet Selector API Server")
    print("=" * 60)
    print("\nEndpoints:")
    print("  - Docs: http://localhost:8000/docs")
    print("  - Health: http://localhost:8000/health")
    print("\nCaller endpoints:")
    print("  - GET /protocols")
    print("  - POST /credentials/get")
    print("\nSelection endpoints:")
    print("  - GET /selections/{correlation_id}")
    print("  - POST /selections/{correlation_id}")
    print("\nWallet endpoints:")
    print("  - GET /wallet/invocations/{correlation_id}")
    print("  - POST /wallet/response/{correlation_id}")
    print("  - POST /wallets/register")
    print("\n" + "=" * 60)

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info",
        access_log=True,
    )
