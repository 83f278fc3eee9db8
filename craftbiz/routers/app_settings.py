from fastapi import APIRouter

from .. import schemas
from ..config import settings

router = APIRouter(prefix="/settings", tags=["settings"])

# Shown on the settings screen; none of these exist yet.
ROADMAP = [
    "Premium PDF templates (graphic styles)",
    "Cloud backup + login",
    "Delivery reminders",
    "Accounting export (CSV)",
]


@router.get("/", response_model=schemas.AppSettings)
def read_settings():
    return schemas.AppSettings(
        currency_suffix=settings.CURRENCY_SUFFIX,
        default_client_name=settings.DEFAULT_CLIENT_NAME,
        shop_name=settings.SHOP_NAME,
        roadmap=ROADMAP,
    )
