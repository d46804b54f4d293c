"""Execution RPC backends: the abstract interface and an HTTP JSON-RPC client."""