"""NiceGUI interface - thin presentation layer over the session manager.

Responsibilities:
    - Conversation tabs with per-tab drafts and pending indicators
    - Search scope and route mode selection
    - Message display with source citations
    - Document upload and transcript export

Contains no session logic. Delegates every state change to SessionContext
and Dispatcher.
"""
