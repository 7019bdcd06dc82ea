from functools import lru_cache
import logging

from fastapi import Depends, FastAPI, HTTPException, Query, Response, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from allergen_lens.batch import BatchOrchestrator
from allergen_lens.channel import BatchChannel
from allergen_lens.config import Settings
from allergen_lens.processor import RecipeProcessor
from allergen_lens.schema import BatchRequest, BatchResponse, IngredientLookup
from allergen_lens.service import AllergenResolutionService, build_service

app = FastAPI(title="allergen-lens API", version="1.0.0")
logger = logging.getLogger(__name__)
SETTINGS = Settings.from_env()

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.frontend_origins),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class LexiconOption(BaseModel):
    key: str
    tags: list[str]


class LexiconOptionsResponse(BaseModel):
    version: str
    tag: str | None = None
    total: int
    entries: list[LexiconOption]


@lru_cache(maxsize=1)
def get_service() -> AllergenResolutionService:
    return build_service(SETTINGS)


def get_orchestrator(service: AllergenResolutionService = Depends(get_service)) -> BatchOrchestrator:
    return BatchOrchestrator(RecipeProcessor(service, SETTINGS.max_concurrency))


def get_channel(orchestrator: BatchOrchestrator = Depends(get_orchestrator)) -> BatchChannel:
    return BatchChannel(orchestrator, busy_policy=SETTINGS.busy_policy)


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@app.post("/api/process", response_model=BatchResponse)
async def process_recipes(
    body: BatchRequest,
    orchestrator: BatchOrchestrator = Depends(get_orchestrator),
) -> BatchResponse:
    try:
        reports = await orchestrator.process_all(body.recipes)
    except Exception as exc:
        logger.exception("process failed")
        raise HTTPException(status_code=500, detail="internal_error") from exc
    return BatchResponse(recipes=reports)


@app.get("/api/allergen/{ingredient:path}", response_model=IngredientLookup)
async def check_ingredient(
    ingredient: str,
    service: AllergenResolutionService = Depends(get_service),
) -> IngredientLookup:
    if not ingredient.strip():
        raise HTTPException(status_code=400, detail="ingredient is required")
    return await service.lookup(ingredient)


@app.get("/api/allergens", response_model=LexiconOptionsResponse)
def lexicon_options(
    response: Response,
    tag: str | None = Query(default=None),
    service: AllergenResolutionService = Depends(get_service),
) -> LexiconOptionsResponse:
    lexicon = service.matcher.lexicon
    entries = lexicon.entries_for_tag(tag) if tag else list(lexicon)
    options = sorted(
        (LexiconOption(key=entry.key, tags=sorted(entry.tags)) for entry in entries),
        key=lambda item: item.key,
    )

    response.headers["Cache-Control"] = "public, max-age=86400"
    return LexiconOptionsResponse(
        version=lexicon.version,
        tag=tag,
        total=len(options),
        entries=options,
    )


@app.websocket("/ws")
async def recipe_stream(websocket: WebSocket, channel: BatchChannel = Depends(get_channel)) -> None:
    await channel.serve(websocket)
