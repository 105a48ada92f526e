"""
============================

Exchange Feed Adapters.

============================

This package contains adapter implementations for exchange streaming feeds.
Adapters own the transport, translate exchange-specific frames into typed
messages and drive the book trackers.

"""
