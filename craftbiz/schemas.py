import math
import re
from pydantic import BaseModel, Field, computed_field, field_validator
from typing import Optional, Union
from datetime import datetime
from .models import OrderStatus

# Leading decimal literal, the way a numeric text field is read ("12abc" -> 12).
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_number(value) -> float:
    """
    Normalize loosely typed numeric input to a finite float.

    Numbers pass through, strings are read by their leading decimal literal,
    and anything else (None, "", "abc", NaN, infinity, booleans) becomes 0.0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            match = _LEADING_NUMBER.match(str(value))
            if not match:
                return 0.0
            number = float(match.group(0))
    except (ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class Notice(BaseModel):
    """Blocking user-facing message, carried as an HTTPException detail."""
    title: str
    message: str = ""


class Recipe(BaseModel):
    id: str = "draft"
    name: str = ""
    material_cost: float = Field(0.0, alias="materialCost")
    labor_minutes: float = Field(0.0, alias="laborMinutes")
    hourly_rate: float = Field(0.0, alias="hourlyRate")
    markup_pct: float = Field(0.0, alias="markupPct")
    vat_pct: float = Field(0.0, alias="vatPct")
    notes: Optional[str] = None

    class Config:
        populate_by_name = True

    @field_validator("material_cost", "labor_minutes", "hourly_rate", "markup_pct", "vat_pct", mode="before")
    @classmethod
    def _normalize_number(cls, value):
        return parse_number(value)

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, value):
        return "" if value is None else value


class Breakdown(BaseModel):
    labor_cost: float = Field(alias="laborCost")
    base: float
    with_markup: float = Field(alias="withMarkup")
    with_vat: float = Field(alias="withVat")

    class Config:
        frozen = True
        populate_by_name = True

    @computed_field(alias="markupAmount")
    @property
    def markup_amount(self) -> float:
        return self.with_markup - self.base

    @computed_field(alias="vatAmount")
    @property
    def vat_amount(self) -> float:
        return self.with_vat - self.with_markup


class PricedRecipe(BaseModel):
    recipe: Recipe
    breakdown: Breakdown


class PresetChip(BaseModel):
    id: str
    label: str


class QuoteRequest(BaseModel):
    recipe: Recipe
    client: Optional[str] = None


class QuoteMessage(BaseModel):
    message: str


class ExportResult(BaseModel):
    shared: bool
    path: str
    notice: Optional[Notice] = None


class Order(BaseModel):
    id: str
    client: str
    item: str
    due_date: datetime = Field(alias="dueDate")
    status: OrderStatus = OrderStatus.PLACED
    total: float = 0.0

    class Config:
        populate_by_name = True

    @field_validator("total", mode="before")
    @classmethod
    def _normalize_total(cls, value):
        return parse_number(value)


class OrderCreate(BaseModel):
    client: Optional[str] = None
    item: Optional[str] = None
    total: Optional[Union[float, str]] = None
    due_date: Optional[datetime] = Field(None, alias="dueDate")

    class Config:
        populate_by_name = True


class Reply(BaseModel):
    id: str
    q: str = ""
    a: str
    category: str = "General"


class ReplyCreate(BaseModel):
    q: str = ""
    a: Optional[str] = None
    category: str = "General"


class ShareResult(BaseModel):
    shared: bool = True
    text: str


class AppSettings(BaseModel):
    currency_suffix: str
    default_client_name: str
    shop_name: Optional[str] = None
    roadmap: list = []
