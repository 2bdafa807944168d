"""Realtime notification aggregation for the escrow marketplace client.

The package is layered the same way as the rest of the codebase: ``domain``
holds the canonical entities, ``application`` the normalizer, store and
subscription lifecycle, ``infrastructure`` the transport adapters and
``interfaces`` the HTTP/websocket surface.
"""
