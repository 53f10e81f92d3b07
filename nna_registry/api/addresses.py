"""FastAPI address endpoints: HFN/MFA conversion and validation.

POST /v1/addresses/encode      - mint HFN + MFA for a path and sequential
POST /v1/addresses/hfn-to-mfa  - convert a human-friendly name
POST /v1/addresses/mfa-to-hfn  - convert a machine-friendly address
POST /v1/addresses/validate    - check a (layer, category, subcategory) path
POST /v1/addresses/compose     - build a composite address
POST /v1/addresses/format      - normalize a loosely-typed HFN

Every rule lives in the shared TaxonomyEngine; these handlers only map
request bodies to engine calls.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from nna_registry.taxonomy.engine import TaxonomyEngine, get_engine
from nna_registry.taxonomy.errors import InvalidAddress, MalformedAddress

router = APIRouter(prefix="/v1/addresses", tags=["addresses"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class PathRequest(BaseModel):
    layer: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    subcategory: str = Field(..., min_length=1)


class EncodeRequest(PathRequest):
    sequential: int | str = "000"
    suffix: str | None = None
    components: list[str] | None = None


class EncodeResponse(BaseModel):
    hfn: str
    mfa: str
    alias_of: str | None = None


class ConvertRequest(BaseModel):
    address: str = Field(..., min_length=1)


class ConvertResponse(BaseModel):
    input: str
    output: str


class ValidateResponse(BaseModel):
    ok: bool
    status: str
    path: str | None = None
    message: str = ""
    alias_of: str | None = None


class ComposeRequest(BaseModel):
    base: str = Field(..., min_length=1)
    components: list[str] = Field(..., min_length=1)


class ComposeResponse(BaseModel):
    address: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("/encode", response_model=EncodeResponse)
async def encode_address(
    body: EncodeRequest,
    engine: TaxonomyEngine = Depends(get_engine),
) -> EncodeResponse:
    """Mint both address forms without reserving a sequential."""
    try:
        encoded = engine.codec.encode(
            body.layer,
            body.category,
            body.subcategory,
            body.sequential,
            suffix=body.suffix,
            components=body.components,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    result = engine.validator.validate(body.layer, body.category, body.subcategory)
    return EncodeResponse(hfn=encoded.hfn, mfa=encoded.mfa, alias_of=result.alias_of)


@router.post("/hfn-to-mfa", response_model=ConvertResponse)
async def hfn_to_mfa(
    body: ConvertRequest,
    engine: TaxonomyEngine = Depends(get_engine),
) -> ConvertResponse:
    """Convert an HFN; malformed input comes back unchanged."""
    return ConvertResponse(input=body.address, output=engine.codec.hfn_to_mfa(body.address))


@router.post("/mfa-to-hfn", response_model=ConvertResponse)
async def mfa_to_hfn(
    body: ConvertRequest,
    engine: TaxonomyEngine = Depends(get_engine),
) -> ConvertResponse:
    """Convert an MFA; malformed input comes back unchanged."""
    return ConvertResponse(input=body.address, output=engine.codec.mfa_to_hfn(body.address))


@router.post("/validate", response_model=ValidateResponse)
async def validate_path(
    body: PathRequest,
    engine: TaxonomyEngine = Depends(get_engine),
) -> ValidateResponse:
    """Validate a taxonomy path. Always 200; check ``ok``."""
    result = engine.validator.validate(body.layer, body.category, body.subcategory)
    return ValidateResponse(
        ok=result.ok,
        status=result.status.value,
        path=result.path.key if result.path is not None else None,
        message=result.message,
        alias_of=result.alias_of,
    )


@router.post("/compose", response_model=ComposeResponse)
async def compose_address(
    body: ComposeRequest,
    engine: TaxonomyEngine = Depends(get_engine),
) -> ComposeResponse:
    """Append component addresses to a Composite-layer base address."""
    try:
        address = engine.codec.compose(body.base, body.components)
    except (InvalidAddress, MalformedAddress) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ComposeResponse(address=address)


@router.post("/format", response_model=ConvertResponse)
async def format_address(
    body: ConvertRequest,
    engine: TaxonomyEngine = Depends(get_engine),
) -> ConvertResponse:
    """Normalize an HFN's case, display names and sequential padding."""
    return ConvertResponse(input=body.address, output=engine.codec.format_hfn(body.address))
