"""
Pneuma - Node interaction layer for Scriptorium.

Provides the JSON-RPC transport, the cursor-based range pager, and the
transaction build / sign / broadcast pipeline.

Uses httpx + eth-account; no protobuf or gRPC stack.
"""
