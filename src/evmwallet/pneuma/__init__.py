"""
Pneuma - Transaction assembly and the JSON-RPC side of the wallet.

Provides the transaction builder, a minimal JSON-RPC client over httpx,
and the multi-provider broadcaster with failover.
"""
