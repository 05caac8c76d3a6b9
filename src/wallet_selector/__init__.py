"""Wallet Selector

Credential request broker: intercepts digital credential requests, lets
the user choose a wallet and relays the wallet's response to the caller.
"""

__version__ = "0.1.0"
