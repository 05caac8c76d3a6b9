"""Port layer - Interfaces between the broker and its surroundings

Input Ports (Use Cases):
- RequestCredential: Caller-facing credential request
- ArbitrateRequest: Wallet arbitration for one brokered request

Output Ports (External Dependencies):
- WalletStore: Wallet list, enable flag and usage statistics
- SelectionSurface: User's wallet choice
- WalletInvocationChannel: Post-selection wallet round trip
- RequestObjectFetcher: Retrieval of by-reference request parameters
- NativeCredentialPath: The caller's own credential API
- JwtVerifier: Delegated JWT signature verification
"""

from wallet_selector.port.input import *
from wallet_selector.port.output import *
