"""Unit tests for individual components in isolation.

Coverage:
    - session/: Store, repository, transient state, router, context, dispatch
    - client/: Configuration and HTTP error classification
    - auth/: Static and Supabase providers
    - export: Transcript rendering

Uses a scripted answering service and httpx.MockTransport instead of a
real backend.
"""
