"""
Theurgy - Command implementations for the Scriptorium CLI.

Each module corresponds to a top-level CLI command or group:
- keys:     Manage the encrypted key store (new / add / remove / list)
- chain:    Read chain state, accounts, and block producers
- transfer: Sign and broadcast a transfer
"""
