import asyncio
import json
import logging
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from event_generators import (
    ConfigurationError,
    DifficultyTier,
    Event,
    EventOrchestrator,
    GeneratorOptions,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="RPG Event Generator Backend", version="1.0.0")

# CORS middleware for game clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Shared generator; corpus and tier changes apply to every later request
orchestrator = EventOrchestrator(options=GeneratorOptions.from_env())


class EventRequest(BaseModel):
    context: Dict[str, Any] = {}
    count: int = Field(default=1, ge=1, le=50)


class EventResponse(BaseModel):
    events: List[Event]


class CorpusRequest(BaseModel):
    sentences: List[str]
    theme: Optional[str] = None


@app.get("/")
async def root():
    return {"status": "ok", "message": "RPG Event Generator Backend is running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


# Generating handlers are sync so they run in the threadpool, off the event loop
@app.post("/events", response_model=EventResponse)
def generate_events(request: EventRequest):
    events = orchestrator.generate_events(request.context, request.count)
    logger.info("Generated %d event(s)", len(events))
    return EventResponse(events=events)


async def generate_stream(request: EventRequest) -> AsyncGenerator[str, None]:
    # SSE comment to establish the stream before the first event
    yield ": stream-start\n\n"
    await asyncio.sleep(0)

    try:
        for index in range(request.count):
            event = await asyncio.to_thread(orchestrator.generate_event, request.context)
            payload = {"type": "event", "index": index, "event": event.model_dump()}
            yield f"data: {json.dumps(payload)}\n\n"
            await asyncio.sleep(0)

        yield f"data: {json.dumps({'type': 'done', 'count': request.count})}\n\n"

    except Exception as e:
        logger.exception("Event stream failed")
        error_msg = f"{type(e).__name__}: {str(e)}"
        yield f"data: {json.dumps({'type': 'error', 'error': error_msg})}\n\n"


@app.post("/events/stream")
async def stream_events(request: EventRequest):
    """
    Streaming endpoint using Server-Sent Events (SSE).
    Sends each event as soon as it is generated, then a final 'done' message.
    """
    return StreamingResponse(
        generate_stream(request),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )


@app.post("/context/analyze")
def analyze_context(context: Dict[str, Any]):
    return {
        "analysis": orchestrator.analyze_context(context).model_dump(),
        "modifiers": orchestrator.get_context_modifiers(context).model_dump(),
        "validation": orchestrator.validate_context(context).model_dump(),
    }


@app.post("/corpus")
def add_corpus(request: CorpusRequest):
    added = orchestrator.add_corpus(request.sentences, theme=request.theme)
    return {"added": added, "stats": orchestrator.engine.stats().model_dump()}


@app.get("/tiers", response_model=List[DifficultyTier])
def list_tiers():
    return orchestrator.scaler.tiers


@app.post("/tiers", response_model=DifficultyTier)
def add_tier(tier: Dict[str, Any]):
    try:
        return orchestrator.add_difficulty_tier(tier)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail={"message": str(e), "errors": e.errors})


@app.delete("/tiers/{name}")
def remove_tier(name: str):
    if not orchestrator.remove_difficulty_tier(name):
        raise HTTPException(status_code=404, detail=f"Tier '{name}' not found")
    return {"removed": name}


@app.get("/stats")
def stats():
    return orchestrator.get_stats()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
