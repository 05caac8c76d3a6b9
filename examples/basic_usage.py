"""
Basic usage example for the Wallet Selector

This script demonstrates, without the HTTP layer:
1. Wiring the broker (relay, coordinator, interception boundary)
2. Requesting a credential with an OpenID4VP request
3. Answering the wallet selection
4. Delivering the wallet's response
5. Receiving the validated credential
"""

import asyncio
import json

from wallet_selector.api.dependencies import DependencyContainer
from wallet_selector.config import create_test_config


async def wait_for(pending) -> str:
    """Poll a deferred adapter until a request is waiting on it"""
    while not pending():
        await asyncio.sleep(0.01)
    return pending()[0]


async def main():
    """Run the example"""

    print("=" * 60)
    print("Wallet Selector - Basic Usage Example")
    print("=" * 60)

    # 1. Setup
    print("\n1. Starting the broker...")

    container = DependencyContainer(config=create_test_config())
    await container.start()
    boundary = container.get_boundary()
    selection = container.get_selection_surface()
    invocation = container.get_wallet_invocation()

    print(f"✓ Supported protocols: {boundary.supported_protocols}")

    # 2. Request a credential
    print("\n2. Requesting a credential...")

    options = {
        "digital": {
            "requests": [
                {
                    "protocol": "openid4vp",
                    "data": {
                        "client_id": "x509_san_dns:verifier.example.com",
                        "response_type": "vp_token",
                        "response_mode": "direct_post",
                        "response_uri": "https://verifier.example.com/post",
                        "nonce": "n-0S6_WzA2Mj",
                        "dcql_query": {"credentials": [{"id": "pid", "format": "dc+sd-jwt"}]},
                    },
                }
            ]
        }
    }
    request = asyncio.create_task(boundary.get(options))

    # 3. The user picks a wallet
    correlation_id = await wait_for(selection.pending)
    offered = selection.get_pending(correlation_id)
    print(f"✓ Selection {correlation_id} offers {[wallet.name for wallet in offered.wallets]}")

    chosen = selection.choose_wallet(correlation_id, offered.wallets[0].id).unwrap()
    print(f"\n3. User chose {chosen.wallet.name} ({chosen.matched_protocol})")

    # 4. The wallet answers
    await wait_for(invocation.pending)
    print(f"✓ Wallet opened at {invocation.get_pending(correlation_id).authorization_url}")

    print("\n4. Wallet posts its response...")
    invocation.deliver_response(
        correlation_id,
        {
            "vp_token": "eyJ...fake-vp-token...",
            "presentation_submission": {
                "id": "submission-1",
                "definition_id": "pid_request",
                "descriptor_map": [{"id": "pid", "format": "dc+sd-jwt", "path": "$"}],
            },
        },
    )

    # 5. The caller receives the credential
    credential = await request
    print("\n5. Credential received:")
    print(json.dumps(credential.to_json(), indent=2))

    await container.close()

    print("\n" + "=" * 60)
    print("Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
