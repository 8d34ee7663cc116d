from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging
from pydantic import BaseModel, ValidationError

from agent.agent import ReplyGenerator, build_generator, run_chat
from agent.core.memory import NoteStore
from config.settings import Settings, get_settings


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("soulis")


class ChatTurn(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatReply(BaseModel):
    role: str = "assistant"
    content: str


class ChatResponse(BaseModel):
    reply: ChatReply


def get_note_store(request: Request) -> NoteStore:
    return request.app.state.note_store


def get_generator_factory(request: Request) -> Callable[[], ReplyGenerator]:
    state = request.app.state

    def factory() -> ReplyGenerator:
        if state.generator is None:
            state.generator = build_generator(state.settings)
        return state.generator

    return factory


def parse_messages(payload: Any) -> List[Dict[str, Any]]:
    messages = payload.get("messages") if isinstance(payload, dict) else None
    if not isinstance(messages, list):
        raise HTTPException(status_code=400, detail="messages must be an array")

    turns: List[Dict[str, Any]] = []
    for idx, item in enumerate(messages):
        try:
            turns.append(ChatTurn.model_validate(item).model_dump())
        except ValidationError:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"messages[{idx}] must be an object with a system, user "
                    "or assistant role and string content"
                ),
            )
    return turns


router = APIRouter()


@router.post("/api/chat", response_model=ChatResponse)
def chat(
    payload: Any = Body(None),
    store: NoteStore = Depends(get_note_store),
    generator_factory: Callable[[], ReplyGenerator] = Depends(get_generator_factory),
) -> Dict[str, Any]:
    history = parse_messages(payload)

    try:
        logger.info("Incoming chat: turns=%s notes=%s", len(history), len(store))
        output_text = run_chat(history, store, generator_factory)
        logger.info("Replying with %s chars", len(output_text))
        return {"reply": {"role": "assistant", "content": output_text}}
    except Exception as e:
        logger.exception("Chat processing failed: %s", e)
        # Full traceback is in server logs; the caller only gets a generic error
        raise HTTPException(status_code=500, detail="Server error")


@router.get("/health")
def health(store: NoteStore = Depends(get_note_store)):
    return {"status": "ok", "notes": len(store)}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Unparseable bodies get the same 400 as a missing messages array
        logger.warning("Rejected request body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"detail": "messages must be an array"})


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[NoteStore] = None,
    generator: Optional[ReplyGenerator] = None,
) -> FastAPI:
    settings = settings or get_settings()
    if store is None:
        store = NoteStore(settings.notes_path, capacity=settings.notes_capacity)
        store.load()

    app = FastAPI(title="Soulis Chat Assistant", version="1.0.0")
    app.state.settings = settings
    app.state.note_store = store
    app.state.generator = generator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    register_exception_handlers(app)

    # Mounted last so the API routes take precedence over "/"
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
    else:
        logger.info("Static directory %s not found; front-end not served", static_dir)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info("Soulis server running on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
