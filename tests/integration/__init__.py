"""Integration tests for components working together as a system.

No mocks in the session path - the real client and dispatcher talk to an
in-process FastAPI backend through ASGITransport.

Coverage:
    - Routing of queries to the basic, graph and report endpoints
    - Error statuses recorded as diagnostic replies
    - Persistence across a simulated page reload
    - Document upload and listing
"""
