"""FastAPI sequence endpoints.

POST   /v1/sequences/next                                  - reserve the next sequential, mint addresses
GET    /v1/sequences/peek                                  - preview the next sequential
DELETE /v1/sequences/{layer}/{category}/{subcategory}      - reset a path counter (admin)

Counter increments commit with the request (Unit-of-Work), so a failed
request never burns a number.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from nna_registry.api.dependencies import get_sequence_allocator
from nna_registry.sequencing.allocator import SequenceAllocator
from nna_registry.taxonomy.engine import TaxonomyEngine, get_engine
from nna_registry.taxonomy.errors import InvalidAddress, SequenceConflict

router = APIRouter(prefix="/v1/sequences", tags=["sequences"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class NextSequenceRequest(BaseModel):
    layer: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    subcategory: str = Field(..., min_length=1)
    suffix: str | None = None
    components: list[str] | None = None


class SequenceResponse(BaseModel):
    path: str
    sequential: str
    hfn: str
    mfa: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("/next", status_code=201, response_model=SequenceResponse)
async def next_sequence(
    body: NextSequenceRequest,
    allocator: SequenceAllocator = Depends(get_sequence_allocator),
    engine: TaxonomyEngine = Depends(get_engine),
) -> SequenceResponse:
    """Validate the path, reserve its next sequential and mint both addresses."""
    try:
        path = allocator.canonical_path(body.layer, body.category, body.subcategory)
        sequential = await allocator.next(path.layer.value, path.category, path.subcategory)
        encoded = engine.codec.encode(
            path.layer.value,
            path.category,
            path.subcategory,
            sequential,
            suffix=body.suffix,
            components=body.components,
        )
    except SequenceConflict as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return SequenceResponse(
        path=path.key, sequential=sequential, hfn=encoded.hfn, mfa=encoded.mfa,
    )


@router.get("/peek", response_model=SequenceResponse)
async def peek_sequence(
    layer: str = Query(..., min_length=1),
    category: str = Query(..., min_length=1),
    subcategory: str = Query(..., min_length=1),
    allocator: SequenceAllocator = Depends(get_sequence_allocator),
    engine: TaxonomyEngine = Depends(get_engine),
) -> SequenceResponse:
    """The addresses ``next`` would mint now. Nothing is reserved."""
    try:
        path = allocator.canonical_path(layer, category, subcategory)
        sequential = await allocator.peek(path.layer.value, path.category, path.subcategory)
    except InvalidAddress as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    encoded = engine.codec.encode(
        path.layer.value, path.category, path.subcategory, sequential,
    )
    return SequenceResponse(
        path=path.key, sequential=sequential, hfn=encoded.hfn, mfa=encoded.mfa,
    )


@router.delete("/{layer}/{category}/{subcategory}", status_code=204)
async def clear_sequence(
    layer: str,
    category: str,
    subcategory: str,
    allocator: SequenceAllocator = Depends(get_sequence_allocator),
) -> Response:
    """Reset a path so numbering restarts at 001."""
    try:
        await allocator.clear(layer, category, subcategory)
    except InvalidAddress as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return Response(status_code=204)
