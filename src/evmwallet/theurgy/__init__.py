"""
Theurgy - Command implementations for the evmwallet CLI.

Each module corresponds to a top-level CLI command:
- derive:  Show addresses derived from a mnemonic (``address``)
- sign:    Build, sign and optionally broadcast a transaction
- send:    Broadcast raw transactions and look up receipts
- divine:  Query network and account status
"""
