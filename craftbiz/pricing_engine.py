"""
Pricing Engine.

Turns a Recipe (cost profile) into an itemized Breakdown.
Pure math: minutes × rate, materials + labor, subtotal × markup, × VAT.

Input: Recipe
Output: Breakdown (labor_cost, base, with_markup, with_vat)

No validation and no rounding here. Negative costs or percentages are priced
as given; presentation rounding belongs to the quote renderer.
"""

from functools import lru_cache

from .schemas import Breakdown, PricedRecipe, Recipe


@lru_cache(maxsize=256)
def _price(material_cost: float, labor_minutes: float, hourly_rate: float,
           markup_pct: float, vat_pct: float) -> Breakdown:
    labor_cost = (labor_minutes / 60) * hourly_rate
    base = material_cost + labor_cost
    with_markup = base * (1 + markup_pct / 100)
    with_vat = with_markup * (1 + vat_pct / 100)
    return Breakdown(
        labor_cost=labor_cost,
        base=base,
        with_markup=with_markup,
        with_vat=with_vat,
    )


def calc_price(recipe: Recipe) -> Breakdown:
    """
    Price a recipe. Memoized on the numeric fields, so the name, id and
    notes of a recipe never affect (or invalidate) its breakdown.
    """
    return _price(
        recipe.material_cost,
        recipe.labor_minutes,
        recipe.hourly_rate,
        recipe.markup_pct,
        recipe.vat_pct,
    )


class PricingEngine:
    """Router-facing wrapper around calc_price."""

    def breakdown(self, recipe: Recipe) -> Breakdown:
        return calc_price(recipe)

    def price_recipe(self, recipe: Recipe) -> PricedRecipe:
        return PricedRecipe(recipe=recipe, breakdown=self.breakdown(recipe))
