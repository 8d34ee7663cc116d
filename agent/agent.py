from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from agent.core.commands import handle_memory_command
from agent.core.memory import NoteStore
from agent.core.prompt import FALLBACK_REPLY, SYSTEM_PROMPT
from agent.core.retrieval import build_context_block, select_notes
from config.settings import Settings, get_settings


logger = logging.getLogger(__name__)

GOOGLE_SEARCH_TOOL: Dict[str, Any] = {"google_search": {}}


class ReplyGenerator:
    """Calls the chat model, first with web search grounding, then without."""

    def __init__(self, llm: BaseChatModel, enable_web_search: bool = True) -> None:
        self.llm = llm
        self.enable_web_search = enable_web_search

    def generate(self, messages: Sequence[BaseMessage]) -> str:
        messages = list(messages)
        if self.enable_web_search:
            try:
                result = self.llm.bind_tools([GOOGLE_SEARCH_TOOL]).invoke(messages)
            except Exception as exc:
                logger.warning("Search-enabled call failed, retrying without tools: %s", exc)
                result = self.llm.invoke(messages)
        else:
            result = self.llm.invoke(messages)
        return extract_text(result) or FALLBACK_REPLY


def build_generator(settings: Optional[Settings] = None) -> ReplyGenerator:
    settings = settings or get_settings()
    if not settings.google_api_key:
        raise RuntimeError(
            "GOOGLE_API_KEY not set. Please configure it in environment or .env"
        )

    llm = ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.google_api_key,
        temperature=settings.temperature,
        top_p=settings.top_p,
    )
    return ReplyGenerator(llm, enable_web_search=settings.enable_web_search)


def extract_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text") or ""))
        return "".join(parts).strip()
    return ""


def to_lc_messages(history: List[dict]) -> List[BaseMessage]:
    messages: List[BaseMessage] = []
    for item in history or []:
        role = (item.get("role") or "").lower()
        content = item.get("content") or ""
        if not content:
            continue
        if role == "system":
            messages.append(SystemMessage(content=content))
        elif role in ("assistant", "ai", "bot"):
            messages.append(AIMessage(content=content))
        else:
            # Unknown roles are treated as user input
            messages.append(HumanMessage(content=content))
    return messages


def latest_user_message(history: List[dict]) -> str:
    for item in reversed(history or []):
        if (item.get("role") or "").lower() in ("user", "human"):
            return item.get("content") or ""
    return ""


def build_prompt_messages(history: List[dict], store: NoteStore) -> List[BaseMessage]:
    messages: List[BaseMessage] = [SystemMessage(content=SYSTEM_PROMPT)]
    context = build_context_block(select_notes(store.all(), latest_user_message(history)))
    if context:
        messages.append(SystemMessage(content=context))
    messages.extend(to_lc_messages(history))
    return messages


def run_chat(history: List[dict], store: NoteStore, get_generator) -> str:
    """Answer one conversation turn.

    ``get_generator`` is only called when the model is actually needed, so
    memory commands work without model credentials.
    """
    acknowledgement = handle_memory_command(latest_user_message(history), store)
    if acknowledgement is not None:
        logger.info("Memory command stored; skipping model call")
        return acknowledgement

    messages = build_prompt_messages(history, store)
    logger.info("Calling model with %s messages", len(messages))
    return get_generator().generate(messages)
