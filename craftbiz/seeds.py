"""
First-run contents for each collection.

Used whenever a collection has never been stored or its stored copy can't be
parsed. Orders are built fresh on every call so due dates track "now".
"""

from datetime import datetime, timedelta

from .models import OrderStatus
from .schemas import Order, Recipe, Reply

DEFAULT_RECIPE = {
    "id": "preset-1",
    "name": "Cutie gravată 20×20",
    "materialCost": 30,
    "laborMinutes": 25,
    "hourlyRate": 60,
    "markupPct": 30,
    "vatPct": 19,
    "notes": "Placaj 4 mm; gravură față; bandă dublu-adezivă",
}

DEFAULT_REPLIES = [
    {
        "id": "r1",
        "category": "Preț",
        "q": "Cât costă?",
        "a": (
            "Prețul depinde de dimensiune și personalizare. Exemple: 20×20 cm de la 130 lei. "
            "Spune-mi mărimea dorită și personalizez oferta. 😊"
        ),
    },
    {
        "id": "r2",
        "category": "Timp",
        "q": "În cât timp livrați?",
        "a": (
            "Producția durează 1–3 zile lucrătoare, iar livrarea 1–2 zile. "
            "Pentru urgențe, avem opțiune rapidă."
        ),
    },
    {
        "id": "r3",
        "category": "Culoare",
        "q": "Faceți pe albastru?",
        "a": "Da, putem face pe aproape orice culoare. Trimite-mi o poză de referință și potrivim nuanța.",
    },
]


def default_recipes():
    return [Recipe.model_validate(DEFAULT_RECIPE)]


def seed_orders():
    now = datetime.utcnow()
    return [
        Order(
            id="1",
            client="Ana Pop",
            item='Tablă nume "Mihail"',
            due_date=now + timedelta(days=1),
            status=OrderStatus.PLACED,
            total=180,
        ),
        Order(
            id="2",
            client="Studio X",
            item="Cutie gravată 20×20",
            due_date=now,
            status=OrderStatus.IN_PROGRESS,
            total=130,
        ),
    ]


def default_replies():
    return [Reply.model_validate(r) for r in DEFAULT_REPLIES]
