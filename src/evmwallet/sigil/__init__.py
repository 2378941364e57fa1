"""
Sigil - Key material and signatures.

- keys:    BIP-39 mnemonic validation and BIP-44 account derivation
- signing: EIP-155 legacy transaction signing and recovery
"""
