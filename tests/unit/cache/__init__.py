"""Test package for cache retention.

Contains unit tests for:
- Owner tagging and the cached_object capability
- Scope tracking (nested enable/disable)
- Fallback key store and owner slot registry
- Implicit cache (FIFO capacity, live-set gating, idle expiry)
- ProjectCacheService end-to-end collectibility
"""
