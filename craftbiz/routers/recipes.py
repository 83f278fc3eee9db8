"""
Calculator endpoints: recipes (cost presets) and live pricing.

GET  /api/recipes                 : stored presets, newest first
GET  /api/recipes/presets         : id + short label for the preset bar
POST /api/recipes/presets         : save the current recipe as a new preset
GET  /api/recipes/{id}/breakdown  : price a stored preset
POST /api/pricing/breakdown       : price an unsaved recipe
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from .. import schemas
from ..dependencies import get_pricing_engine, get_stores
from ..pricing_engine import PricingEngine
from ..stores import StoreRegistry

router = APIRouter(tags=["calculator"])

PRESET_LABEL_LENGTH = 20


def truncate(text: str, length: int) -> str:
    """Cut to length characters, the last one becoming an ellipsis."""
    return text[:length - 1] + "…" if len(text) > length else text


@router.get("/recipes", response_model=List[schemas.Recipe])
def list_recipes(stores: StoreRegistry = Depends(get_stores)):
    return stores.recipes.all()


@router.get("/recipes/presets", response_model=List[schemas.PresetChip])
def list_preset_chips(stores: StoreRegistry = Depends(get_stores)):
    return [
        schemas.PresetChip(id=r.id, label=truncate(r.name, PRESET_LABEL_LENGTH))
        for r in stores.recipes.all()
    ]


@router.post("/recipes/presets", response_model=schemas.Recipe)
def save_as_preset(recipe: schemas.Recipe, stores: StoreRegistry = Depends(get_stores)):
    """Clone the recipe under a fresh preset-<millis> id and put it first."""
    return stores.recipes.add(
        lambda new_id: recipe.model_copy(update={"id": new_id}),
        prefix="preset-",
    )


@router.get("/recipes/{recipe_id}/breakdown", response_model=schemas.PricedRecipe)
def price_stored_recipe(
    recipe_id: str,
    stores: StoreRegistry = Depends(get_stores),
    engine: PricingEngine = Depends(get_pricing_engine),
):
    recipe = stores.recipes.get(recipe_id)
    if not recipe:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return engine.price_recipe(recipe)


@router.post("/pricing/breakdown", response_model=schemas.Breakdown)
def price_recipe(recipe: schemas.Recipe, engine: PricingEngine = Depends(get_pricing_engine)):
    return engine.breakdown(recipe)
