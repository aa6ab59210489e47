"""Test package for the legal research chat client.

Structure:
    - unit/: Individual components in isolation
    - integration/: Session flow against an in-process FastAPI backend

Leverages pytest with pytest-asyncio for coroutines and pytest-check for
soft assertions.
"""
