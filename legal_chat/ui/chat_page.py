"""NiceGUI chat interface with multiple conversation tabs."""

import asyncio
import logging

from nicegui import app, events, run, ui
from supabase import AuthError

from legal_chat.auth.provider import SupabaseAuthProvider, create_auth_provider
from legal_chat.client.api import get_backend_client
from legal_chat.client.config import get_client_config
from legal_chat.client.errors import BackendError
from legal_chat.documents import documents_by_category, format_file_size
from legal_chat.export import can_export, export_filename, export_transcript
from legal_chat.models.schemas import Document, Message, RouteMode, SearchScope, Sender
from legal_chat.session.context import SessionContext
from legal_chat.session.dispatch import Dispatcher
from legal_chat.session.repository import ConversationRepository
from legal_chat.session.store import create_store

logger = logging.getLogger(__name__)

SCOPE_LABELS = {
    SearchScope.PRECEDENTS: "Precedents",
    SearchScope.STATUTES: "Statutes",
    SearchScope.BOTH: "Both",
}
ROUTE_LABELS = {
    RouteMode.DEFAULT: "Default",
    RouteMode.LANGGRAPH: "LangGraph",
    RouteMode.GENERATE_REPORT: "Generate report",
}
PENDING_TEXT = "Analyzing your query... This may take 2-3 minutes for complex legal research."
DOCUMENT_HEADINGS = {
    SearchScope.PRECEDENTS: "Legal Precedents",
    SearchScope.STATUTES: "Statutes & Regulations",
}
STATUS_ICONS = {
    "ready": ("check_circle", "text-green-600"),
    "processing": ("schedule", "text-amber-600"),
    "error": ("error", "text-red-600"),
}
DEFAULT_STATUS_ICON = ("description", "text-slate-400")

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: linear-gradient(135deg, #f8fafc 0%, #f1f5f9 100%); min-height: 100vh; }

    .header { background: white; border-bottom: 1px solid #e2e8f0; }
    .brand-badge { background: #d97706; border-radius: 8px; }

    .tab-active { background: white; border-bottom: 2px solid #d97706; }
    .tab-idle { background: #f1f5f9; }

    .message-user {
        background: #1e293b;
        color: white;
        border-radius: 12px;
    }

    .message-assistant {
        background: white;
        color: #1e293b;
        border: 1px solid #e2e8f0;
        border-radius: 12px;
    }

    .avatar-user { background: #1e293b; }
    .avatar-assistant { background: #fef3c7; }

    .source-card { background: #f8fafc; border-radius: 6px; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #d97706;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.1s; }
    .typing-dot:nth-child(3) { animation-delay: 0.2s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
</style>
"""


def format_time(message: Message) -> str:
    return message.timestamp.astimezone().strftime("%I:%M %p")


def render_auth_form(auth: SupabaseAuthProvider) -> None:
    """Email/password sign-in shown when no user is present."""

    async def authenticate(sign_up: bool) -> None:
        action = auth.sign_up if sign_up else auth.sign_in
        try:
            await run.io_bound(action, email.value, password.value)
        except AuthError as e:
            logger.warning(f"Authentication failed for {email.value}: {e}")
            ui.notify(str(e), type="negative")
            return
        auth.persist()
        if auth.current_user() is None:
            ui.notify("Check your email to confirm the account, then sign in.", type="info")
            return
        ui.navigate.reload()

    with ui.column().classes("w-full min-h-screen items-center justify-center"):
        with ui.card().classes("w-96 gap-3"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("balance").classes("text-amber-600 text-3xl")
                ui.label("LegalAI Assistant").classes("text-xl font-bold text-slate-800")
            email = ui.input("Email").classes("w-full")
            password = ui.input("Password", password=True, password_toggle_button=True).classes(
                "w-full"
            )
            with ui.row().classes("w-full justify-end gap-2"):
                ui.button("Sign up", on_click=lambda: authenticate(True)).props("flat")
                ui.button("Sign in", on_click=lambda: authenticate(False)).props(
                    "unelevated color=amber-8"
                )


def render_avatar(is_user: bool) -> None:
    css = "avatar-user" if is_user else "avatar-assistant"
    icon = "person" if is_user else "smart_toy"
    color = "text-white" if is_user else "text-amber-800"
    with ui.element("div").classes(f"w-8 h-8 rounded-full flex items-center justify-center {css}"):
        ui.icon(icon).classes(f"{color} text-base")


def render_message(message: Message) -> None:
    is_user = message.sender is Sender.USER
    align = "justify-end" if is_user else "justify-start"
    bubble = "message-user" if is_user else "message-assistant"

    with ui.row().classes(f"w-full {align} gap-3 items-start no-wrap"):
        if not is_user:
            render_avatar(False)
        with ui.column().classes("max-w-[75%] gap-1"):
            with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                if is_user:
                    ui.label(message.content).classes("text-sm whitespace-pre-wrap break-words")
                else:
                    ui.markdown(message.content).classes("text-sm leading-relaxed")
                if message.sources:
                    ui.separator().classes("my-3")
                    ui.label("Sources:").classes("text-xs font-semibold text-slate-600")
                    for source in message.sources:
                        with ui.column().classes("source-card p-2 gap-1 w-full"):
                            with ui.row().classes("w-full justify-between items-center"):
                                ui.label(source.document).classes("text-xs font-medium")
                                ui.badge(f"Page {source.page}", color="grey-4").props(
                                    "text-color=grey-9"
                                )
                            ui.label(f'"{source.excerpt}"').classes(
                                "text-xs italic text-slate-600"
                            )
            ui.label(format_time(message)).classes(
                f"text-[10px] text-slate-500 {'self-end' if is_user else 'self-start'}"
            )
        if is_user:
            render_avatar(True)


def render_pending_indicator() -> None:
    with ui.row().classes("w-full justify-start gap-3 items-start no-wrap"):
        render_avatar(False)
        with ui.element("div").classes("message-assistant px-4 py-3"):
            with ui.row().classes("items-center gap-2 no-wrap"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")
                ui.label(PENDING_TEXT).classes("text-sm text-slate-600")


@ui.page("/")
async def chat_page() -> None:
    """Main chat page.

    Each page load builds its own auth provider and session context; the
    signed-in user and their conversations never leave this browser.
    """
    ui.add_head_html(CUSTOM_CSS)

    config = get_client_config()
    storage = app.storage.user
    auth = create_auth_provider(config, storage)
    if isinstance(auth, SupabaseAuthProvider):
        await run.io_bound(auth.restore)
        auth.persist()

    user = auth.current_user()
    if user is None:
        if isinstance(auth, SupabaseAuthProvider):
            render_auth_form(auth)
        else:
            ui.label("No user available").classes("text-slate-500")
        return

    backend = get_backend_client()
    store = create_store(config.conversations_dir, storage, user.id)
    context = SessionContext(repository=ConversationRepository.from_store(store), user=user)
    context.initialize()
    dispatcher = Dispatcher(backend)
    documents: list[Document] = []

    unsubscribe = auth.subscribe(context.set_user)
    ui.context.client.on_disconnect(unsubscribe)

    input_field: ui.input
    send_btn: ui.button

    def refresh_all() -> None:
        tabs_bar.refresh()
        sidebar.refresh()
        messages_view.refresh()
        input_field.value = context.draft
        if context.is_pending or context.active is None:
            send_btn.disable()
        else:
            send_btn.enable()

    def new_conversation() -> None:
        context.new_conversation()
        refresh_all()

    def close_conversation(conversation_id: str) -> None:
        context.close_conversation(conversation_id)
        # Keep a conversation available while signed in.
        context.initialize()
        refresh_all()

    def select_conversation(conversation_id: str) -> None:
        context.select(conversation_id)
        refresh_all()

    def change_scope(e: events.ValueChangeEventArguments) -> None:
        context.change_scope(SearchScope(e.value))
        messages_view.refresh()

    def change_route_mode(e: events.ValueChangeEventArguments) -> None:
        context.change_route_mode(RouteMode(e.value))

    def export_active() -> None:
        conversation = context.active
        if not can_export(conversation):
            return
        ui.download.content(
            export_transcript(conversation), export_filename(conversation), "text/plain"
        )

    async def load_documents() -> None:
        try:
            documents[:] = await backend.list_documents()
        except BackendError as err:
            ui.notify(err.message, type="warning")
        documents_panel.refresh()

    async def delete_document(document: Document) -> None:
        try:
            await backend.delete_document(document.id)
        except BackendError as err:
            ui.notify(err.message, type="negative")
            return
        ui.notify(f"Removed {document.name}", type="positive")
        await load_documents()

    async def upload_document(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        token = auth.access_token() if isinstance(auth, SupabaseAuthProvider) else None
        try:
            result = await backend.upload_documents(
                [(e.file.name, content)], user_id=context.user.id, access_token=token
            )
        except BackendError as err:
            ui.notify(err.message, type="negative")
            return
        for item in result.files:
            kind = "positive" if item.status == "success" else "negative"
            ui.notify(f"{item.filename}: {item.message or item.status}", type=kind)
        await load_documents()

    async def send_message() -> None:
        target_id = context.active_id
        if target_id is None:
            return
        context.transient.set_draft(target_id, input_field.value or "")
        submission = asyncio.ensure_future(dispatcher.submit(context, target_id))
        # Let the dispatcher take the draft and raise the pending flag first.
        await asyncio.sleep(0)
        refresh_all()
        try:
            await submission
        finally:
            refresh_all()

    async def sign_out() -> None:
        if isinstance(auth, SupabaseAuthProvider):
            await run.io_bound(auth.sign_out)
            auth.persist()
        ui.navigate.reload()

    @ui.refreshable
    def tabs_bar() -> None:
        with ui.row().classes("w-full px-4 pt-2 gap-1 items-end bg-slate-100 no-wrap overflow-x-auto"):
            for conversation in context.repository:
                is_active = conversation.id == context.active_id
                css = "tab-active" if is_active else "tab-idle"
                with ui.row().classes(f"{css} px-3 py-1 rounded-t items-center gap-1 no-wrap"):
                    ui.button(
                        conversation.title,
                        on_click=lambda cid=conversation.id: select_conversation(cid),
                    ).props("flat dense no-caps").classes("text-sm text-slate-700")
                    if context.transient.is_pending(conversation.id):
                        ui.spinner(size="xs", color="amber-8")
                    ui.badge(str(conversation.message_count), color="grey-5")
                    ui.button(
                        icon="close",
                        on_click=lambda cid=conversation.id: close_conversation(cid),
                    ).props("flat round dense size=xs")
            ui.button(icon="add", on_click=new_conversation).props("flat round dense")

    @ui.refreshable
    def sidebar() -> None:
        with ui.column().classes("w-full p-4 gap-4"):
            ui.label("Search Scope").classes("text-sm font-semibold text-slate-700")
            ui.toggle(
                {scope.value: label for scope, label in SCOPE_LABELS.items()},
                value=context.search_scope.value,
                on_change=change_scope,
            ).props("unelevated toggle-color=amber-8")
            ui.label("Route").classes("text-sm font-semibold text-slate-700")
            ui.select(
                {mode.value: label for mode, label in ROUTE_LABELS.items()},
                value=context.route_mode.value,
                on_change=change_route_mode,
            ).classes("w-full")
            ui.label("Upload documents").classes("text-sm font-semibold text-slate-700")
            ui.upload(on_upload=upload_document, multiple=True, auto_upload=True).props(
                "flat bordered accept=.pdf,.txt,.docx"
            ).classes("w-full")
            ui.button("Export Chat", icon="download", on_click=export_active).props(
                "outline"
            ).classes("w-full").set_enabled(can_export(context.active))

    @ui.refreshable
    def documents_panel() -> None:
        grouped = documents_by_category(documents)
        with ui.column().classes("w-full px-4 pb-4 gap-2"):
            for category, items in grouped.items():
                ui.label(f"{DOCUMENT_HEADINGS[category]} ({len(items)})").classes(
                    "text-sm font-semibold text-slate-700"
                )
                if not items:
                    ui.label(f"No {category.value} uploaded yet").classes(
                        "text-xs text-slate-500"
                    )
                for document in items:
                    icon, color = STATUS_ICONS.get(document.status, DEFAULT_STATUS_ICON)
                    with ui.row().classes(
                        "w-full items-center justify-between no-wrap bg-slate-50 rounded p-2"
                    ):
                        with ui.column().classes("gap-0 min-w-0"):
                            ui.label(document.name).classes("text-sm font-medium truncate")
                            with ui.row().classes("items-center gap-1"):
                                ui.icon(icon).classes(f"{color} text-sm")
                                ui.label(format_file_size(document.size)).classes(
                                    "text-xs text-slate-500"
                                )
                        ui.button(
                            icon="delete",
                            on_click=lambda d=document: delete_document(d),
                        ).props("flat round dense size=sm color=red")

    @ui.refreshable
    def messages_view() -> None:
        with ui.column().classes("w-full max-w-4xl mx-auto gap-6 p-6"):
            conversation = context.active
            if conversation is None:
                ui.label("No conversation selected").classes("text-slate-400")
                return
            for message in conversation.messages:
                render_message(message)
            if context.is_pending:
                render_pending_indicator()

    # === UI Layout ===
    with ui.column().classes("w-full h-screen gap-0"):
        with ui.row().classes("w-full header px-6 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                with ui.element("div").classes("brand-badge w-8 h-8 flex items-center justify-center"):
                    ui.icon("balance").classes("text-white text-lg")
                with ui.column().classes("gap-0"):
                    ui.label("LegalAI Assistant").classes("text-xl font-bold text-slate-800")
                    ui.label(f"Welcome, {context.user.email or context.user.id}").classes(
                        "text-xs text-slate-600"
                    )
            if isinstance(auth, SupabaseAuthProvider):
                ui.button("Sign out", icon="logout", on_click=sign_out).props("flat")

        tabs_bar()

        with ui.row().classes("w-full flex-grow gap-0 no-wrap"):
            with ui.column().classes("w-72 h-full gap-0 bg-white border-r overflow-y-auto"):
                sidebar()
                documents_panel()
            with ui.column().classes("flex-grow h-full gap-0"):
                with ui.scroll_area().classes("flex-grow w-full"):
                    messages_view()
                with ui.row().classes("w-full p-6 gap-4 items-center bg-white border-t no-wrap"):
                    input_field = (
                        ui.input(
                            placeholder="Ask your legal question... (Response may take 2-3 minutes)",
                            value=context.draft,
                            on_change=lambda e: context.set_draft(e.value or ""),
                        )
                        .props("outlined dense")
                        .classes("flex-grow")
                        .on("keydown.enter", send_message)
                    )
                    send_btn = ui.button(icon="send", on_click=send_message).props(
                        "unelevated color=blue-grey-10"
                    )

    ui.timer(0.1, load_documents, once=True)
