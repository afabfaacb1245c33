"""
Sigil - Keys, signatures, and the encrypted key store.
"""
