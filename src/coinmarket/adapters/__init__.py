"""
============================

Market Data API Adapters.

============================

This package contains adapter implementations for remote market-data APIs.
Adapters translate API-specific payloads into domain models and implement
the client protocol defined in the protocols package.

"""
