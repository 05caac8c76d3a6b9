"""FastAPI application for the Wallet Selector"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wallet_selector.api.dependencies import get_container
from wallet_selector.api.routes import credentials, selections, wallet, wallets

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan context manager.

    Starts the message relay, coordinator and interception boundary on
    startup and closes them (rejecting anything still pending) on shutdown.
    """
    logger.info("Starting Wallet Selector API...")

    container = get_container()
    await container.start()

    logger.info("Wallet Selector API ready")

    yield

    logger.info("Shutting down Wallet Selector API...")
    await container.close()


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Wallet Selector",
        description="""
        Credential request broker for digital identity wallets

        Intercepts digital credential requests, lets the user pick one of the
        registered wallets (or the platform's native credential path) and
        relays the wallet's response back to the caller.

        Supported protocols:
        - OpenID4VP, including JAR request objects passed by reference (request_uri)

        ## Architecture

        - **Domain Layer**: Request state machine, wallet descriptors, relay envelopes
        - **Protocol Layer**: Protocol plugin registry and the OpenID4VP plugin
        - **Application Layer**: Interception boundary, message relay, coordinator
        - **Adapter Layer**: Wallet store, HTTP selection and wallet channels, JWT verification
        - **API Layer**: FastAPI endpoints

        ## Endpoints

        ### Caller Endpoints
        - `GET /protocols` - Supported protocols
        - `POST /credentials/get` - Request a credential
        - `DELETE /credentials/{correlation_id}` - Cancel a request

        ### Selection Endpoints
        - `GET /selections/{correlation_id}` - Wallets offered for a request
        - `POST /selections/{correlation_id}` - Choose a wallet, native, or cancel

        ### Wallet Endpoints
        - `GET /wallet/invocations/{correlation_id}` - Authorization URL for the chosen wallet
        - `POST /wallet/response/{correlation_id}` - Submit the wallet response
        - `POST /wallets/register` - Wallet self-registration
        """,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # allow_origins=["*"] is permissive; restrict it per deployment
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(credentials.router)
    app.include_router(selections.router)
    app.include_router(wallet.router)
    app.include_router(wallets.router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint"""
        return JSONResponse(content={"status": "healthy", "service": "wallet-selector"})

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
