"""Submit → remote call → completion pipeline for one conversation.

Each conversation moves IDLE → PENDING → IDLE. The pending flag is the only
guard against double submission; it is checked and set with no await in
between, so on one event loop two submissions can never both pass.
"""

import logging
from typing import Protocol

from legal_chat.client.errors import BackendError
from legal_chat.models.schemas import AskResponse, Message, SearchScope, Sender
from legal_chat.session.context import SessionContext
from legal_chat.session.router import OperationKind, route

logger = logging.getLogger(__name__)

NO_RESPONSE_PLACEHOLDER = "No response received"


class AnsweringService(Protocol):
    """Remote operation that answers a legal research query."""

    async def ask(
        self, query: str, scope: SearchScope, operation: OperationKind
    ) -> AskResponse: ...


class Dispatcher:
    """Runs submissions against the answering service and records the results."""

    def __init__(self, service: AnsweringService) -> None:
        self._service = service

    async def submit(self, context: SessionContext, conversation_id: str | None = None) -> bool:
        """Send the draft of a conversation to the backend.

        The submission is dropped when there is no user, the conversation
        does not exist, the draft is blank, or a request is already pending.
        Backend failures become a diagnostic reply; they never propagate.

        Args:
            context: Session holding the conversation and its draft.
            conversation_id: Target conversation, defaults to the active one.

        Returns:
            True if a request was dispatched.
        """
        target_id = conversation_id or context.active_id
        if context.user is None or target_id is None:
            return False
        conversation = context.repository.get(target_id)
        if conversation is None:
            return False

        text = context.transient.get_draft(target_id)
        if not text.strip() or context.transient.is_pending(target_id):
            return False

        context.transient.set_draft(target_id, "")
        context.transient.set_pending(target_id, True)
        try:
            user_id, reply_id = context.ids.exchange_ids()
            user_message = Message(id=user_id, content=text, sender=Sender.USER)
            reply = await self._answer(text, conversation.search_scope, reply_id)
            context.repository.append_exchange(target_id, user_message, reply)
        finally:
            # A conversation closed mid-flight must not get its entries back.
            if target_id in context.repository:
                context.transient.set_pending(target_id, False)
        return True

    async def _answer(self, query: str, scope: SearchScope, reply_id: str) -> Message:
        operation = route(query, scope)
        try:
            response = await self._service.ask(query, scope, operation)
        except BackendError as e:
            logger.warning(f"{operation.value} request failed: {e.message}")
            return _diagnostic(reply_id, e.message)
        except Exception as e:
            logger.exception(f"Unexpected failure during {operation.value} request")
            return _diagnostic(reply_id, f"Error: {str(e) or type(e).__name__}")

        logger.info(f"{operation.value} request completed")
        return Message(
            id=reply_id,
            content=response.answer_text(NO_RESPONSE_PLACEHOLDER),
            sender=Sender.ASSISTANT,
            sources=response.source_list(),
        )


def _diagnostic(reply_id: str, text: str) -> Message:
    return Message(id=reply_id, content=text, sender=Sender.ASSISTANT, sources=None)
