"""FastAPI taxonomy catalog endpoints.

GET  /v1/taxonomy/layers                                         - layers + catalog version
GET  /v1/taxonomy/layers/{layer}/categories                      - categories of a layer
GET  /v1/taxonomy/layers/{layer}/categories/{category}/subcategories
POST /v1/taxonomy/refresh                                        - reload catalog documents

Path parameters accept alpha codes, numeric codes or display names.
Read-only over the shared engine; refresh swaps the engine atomically.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from nna_registry.taxonomy.engine import (
    TaxonomyEngine,
    TaxonomyRegistry,
    get_engine,
    get_registry,
)
from nna_registry.taxonomy.errors import InvalidCatalog, UnknownCode

router = APIRouter(prefix="/v1/taxonomy", tags=["taxonomy"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class ItemResponse(BaseModel):
    code: str
    numeric_code: str
    name: str


class LayerResponse(BaseModel):
    code: str
    numeric_code: int
    name: str
    description: str
    file_types: list[str]
    category_count: int


class LayersResponse(BaseModel):
    version: str
    checksum: str
    layers: list[LayerResponse]


class CategoriesResponse(BaseModel):
    layer: str
    categories: list[ItemResponse]


class SubcategoriesResponse(BaseModel):
    layer: str
    category: str
    subcategories: list[ItemResponse]


class RefreshResponse(BaseModel):
    version: str
    checksum: str
    previous_checksum: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/layers", response_model=LayersResponse)
async def list_layers(
    engine: TaxonomyEngine = Depends(get_engine),
) -> LayersResponse:
    """List all layers in catalog order."""
    return LayersResponse(
        version=engine.version,
        checksum=engine.checksum,
        layers=[
            LayerResponse(
                code=layer.code.value,
                numeric_code=layer.numeric_code,
                name=layer.name,
                description=layer.description,
                file_types=list(layer.file_types),
                category_count=len(layer.categories),
            )
            for layer in engine.tree.layers
        ],
    )


@router.get("/layers/{layer}/categories", response_model=CategoriesResponse)
async def list_categories(
    layer: str,
    engine: TaxonomyEngine = Depends(get_engine),
) -> CategoriesResponse:
    """List the categories of one layer."""
    try:
        found = engine.tree.get_layer(layer)
    except UnknownCode as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return CategoriesResponse(
        layer=found.code.value,
        categories=[
            ItemResponse(code=c.code, numeric_code=c.numeric_code, name=c.name)
            for c in found.categories
        ],
    )


@router.get(
    "/layers/{layer}/categories/{category}/subcategories",
    response_model=SubcategoriesResponse,
)
async def list_subcategories(
    layer: str,
    category: str,
    engine: TaxonomyEngine = Depends(get_engine),
) -> SubcategoriesResponse:
    """List the subcategories of one category with their effective numeric codes."""
    found = engine.tree.find_layer(layer)
    if found is None:
        raise HTTPException(status_code=404, detail=f"Unknown layer '{layer}'.")
    category_code = engine.resolver.lookup_code(found.code.value, None, category)
    if category_code is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown category '{category}' in layer {found.code.value}.",
        )

    resolver = engine.resolver
    items = [
        ItemResponse(
            code=sub.code,
            numeric_code=resolver.alpha_to_numeric(
                found.code.value, category_code, sub.code, strict=True,
            ),
            name=sub.name,
        )
        for sub in engine.tree.get_subcategories(found.code.value, category_code)
    ]
    return SubcategoriesResponse(
        layer=found.code.value,
        category=category_code,
        subcategories=items,
    )


@router.post("/refresh", response_model=RefreshResponse)
def refresh_catalog(
    registry: TaxonomyRegistry = Depends(get_registry),
) -> RefreshResponse:
    """Reload the catalog and override documents.

    An invalid catalog is rejected and the current engine keeps serving.
    Declared sync so the file reads and rebuild run in the threadpool.
    """
    previous = registry.get()
    try:
        engine = registry.refresh()
    except InvalidCatalog as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return RefreshResponse(
        version=engine.version,
        checksum=engine.checksum,
        previous_checksum=previous.checksum,
    )
