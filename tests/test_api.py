"""
HTTP tests: calculator, offers, orders, replies, settings.

Tests:
1-7.   Calculator (recipes, presets, pricing)
8-15.  Offers (message, share, HTML, PDF, export)
16-20. Orders (list, add, validation, status cycle)
21-25. Replies (list, add, validation, share)
26.    Settings
27.    Concurrent creates
"""

import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from craftbiz.dependencies import get_document_renderer, get_file_share_sink, get_share_sink
from craftbiz.main import app
from craftbiz.routers.orders import create_order
from craftbiz.routers.recipes import save_as_preset
from craftbiz.routers.replies import create_reply
from craftbiz.schemas import OrderCreate, Recipe, ReplyCreate


class FailingShareSink:
    def share(self, text):
        raise RuntimeError("share sheet dismissed")


class RecordingFileShareSink:
    def __init__(self):
        self.shared = []

    def is_available(self):
        return True

    def share_file(self, path, mime_type, uti=None):
        self.shared.append((Path(path), mime_type, uti))


class FailingRenderer:
    def render(self, document):
        raise OSError("no space left on device")


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# ============================================================
# 1-7. Calculator
# ============================================================

def test_recipes_start_with_default_preset(client):
    resp = client.get("/api/recipes")
    assert resp.status_code == 200
    recipes = resp.json()
    assert len(recipes) == 1
    assert recipes[0]["id"] == "preset-1"
    assert recipes[0]["materialCost"] == 30
    assert recipes[0]["vatPct"] == 19


def test_save_as_preset_clones_with_new_id(client, stores, kv, sample_recipe):
    sample_recipe["name"] = "Tablă nume"
    resp = client.post("/api/recipes/presets", json=sample_recipe)
    assert resp.status_code == 200
    preset = resp.json()
    assert preset["id"].startswith("preset-")
    assert preset["id"] != "preset-1"
    assert preset["name"] == "Tablă nume"
    assert preset["materialCost"] == 30

    ids = [r["id"] for r in client.get("/api/recipes").json()]
    assert ids == [preset["id"], "preset-1"]

    stores.flush()
    stored = json.loads(kv.get("craftbiz/recipes"))
    assert [r["id"] for r in stored] == ids


def test_preset_chips_truncate_long_names(client, sample_recipe):
    sample_recipe["name"] = "A very long preset name indeed"
    client.post("/api/recipes/presets", json=sample_recipe)
    chips = client.get("/api/recipes/presets").json()
    assert chips[0]["label"] == "A very long preset …"
    assert len(chips[0]["label"]) == 20
    assert chips[1] == {"id": "preset-1", "label": "Cutie gravată 20×20"}


def test_breakdown_for_unsaved_recipe(client, sample_recipe):
    resp = client.post("/api/pricing/breakdown", json=sample_recipe)
    assert resp.status_code == 200
    b = resp.json()
    assert abs(b["laborCost"] - 25.0) < 1e-9
    assert abs(b["base"] - 55.0) < 1e-9
    assert abs(b["withMarkup"] - 71.5) < 1e-9
    assert abs(b["withVat"] - 85.085) < 1e-9
    assert abs(b["markupAmount"] - 16.5) < 1e-9


def test_breakdown_treats_garbage_numbers_as_zero(client):
    resp = client.post("/api/pricing/breakdown", json={
        "name": "x", "materialCost": "abc", "laborMinutes": "", "hourlyRate": "60", "markupPct": None,
    })
    assert resp.status_code == 200
    assert resp.json()["withVat"] == 0.0


def test_breakdown_for_stored_recipe(client):
    resp = client.get("/api/recipes/preset-1/breakdown")
    assert resp.status_code == 200
    assert resp.json()["recipe"]["id"] == "preset-1"
    assert abs(resp.json()["breakdown"]["withVat"] - 85.085) < 1e-9

    assert client.get("/api/recipes/nope/breakdown").status_code == 404


def test_breakdown_uses_camel_case_field_names(client, sample_recipe):
    b = client.post("/api/pricing/breakdown", json=sample_recipe).json()
    assert set(b) == {"laborCost", "base", "withMarkup", "withVat", "markupAmount", "vatAmount"}

    priced = client.get("/api/recipes/preset-1/breakdown").json()
    assert "materialCost" in priced["recipe"]
    assert "laborCost" in priced["breakdown"]


# ============================================================
# 8-15. Offers
# ============================================================

def test_offer_message_uses_default_client(client, sample_recipe):
    resp = client.post("/api/quotes/message", json={"recipe": sample_recipe})
    assert resp.status_code == 200
    lines = resp.json()["message"].split("\n")
    assert lines[0] == "Offer — Cutie gravată 20×20"
    assert lines[1] == "Client: Client Nume SRL"
    assert "TOTAL: 85.09 lei" in lines


def test_share_offer_sends_message(client, share_sink, sample_recipe):
    resp = client.post("/api/quotes/share", json={"recipe": sample_recipe, "client": "Ana Pop"})
    assert resp.status_code == 200
    message = resp.json()["text"]
    assert share_sink.sent == [message]
    assert "Client: Ana Pop" in message


def test_share_offer_failure_becomes_notice(client, sample_recipe):
    app.dependency_overrides[get_share_sink] = lambda: FailingShareSink()
    resp = client.post("/api/quotes/share", json={"recipe": sample_recipe})
    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["title"] == "Could not share"
    assert detail["message"] == "share sheet dismissed"


def test_offer_html_escapes_user_text(client, sample_recipe):
    sample_recipe["name"] = "<Box & Co>"
    resp = client.post("/api/quotes/html", json={"recipe": sample_recipe, "client": "O'Brien"})
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "<h1>Offer — &lt;Box &amp; Co&gt;</h1>" in resp.text
    assert "O&#39;Brien" in resp.text
    assert "<Box" not in resp.text


def test_offer_pdf_download(client, sample_recipe):
    resp = client.post("/api/quotes/pdf", json={"recipe": sample_recipe})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert "attachment" in resp.headers["content-disposition"]
    assert resp.content[:5] == b"%PDF-"


def test_offer_pdf_failure_becomes_notice(client, sample_recipe, monkeypatch):
    def broken_pdf(document, shop_name=""):
        raise RuntimeError("font missing")

    monkeypatch.setattr("craftbiz.routers.quotes.generate_quote_pdf", broken_pdf)
    resp = client.post("/api/quotes/pdf", json={"recipe": sample_recipe})
    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["title"] == "Could not generate PDF"
    assert detail["message"] == "font missing"


def test_export_without_file_sharing_reports_path(client, sample_recipe):
    resp = client.post("/api/quotes/export", json={"recipe": sample_recipe})
    assert resp.status_code == 200
    result = resp.json()
    assert result["shared"] is False
    assert result["notice"]["title"] == "PDF created"
    assert result["notice"]["message"] == result["path"]
    assert Path(result["path"]).read_bytes()[:5] == b"%PDF-"


def test_export_shares_file_when_available(client, sample_recipe):
    file_sink = RecordingFileShareSink()
    app.dependency_overrides[get_file_share_sink] = lambda: file_sink
    resp = client.post("/api/quotes/export", json={"recipe": sample_recipe})
    assert resp.status_code == 200
    result = resp.json()
    assert result["shared"] is True
    assert result["notice"] is None
    assert file_sink.shared == [(Path(result["path"]), "application/pdf", "com.adobe.pdf")]


def test_export_failure_becomes_notice(client, sample_recipe):
    app.dependency_overrides[get_document_renderer] = lambda: FailingRenderer()
    resp = client.post("/api/quotes/export", json={"recipe": sample_recipe})
    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["title"] == "Could not generate PDF"
    assert detail["message"] == "no space left on device"


# ============================================================
# 16-20. Orders
# ============================================================

def test_orders_start_with_seed_orders(client):
    orders = client.get("/api/orders/").json()
    assert [o["client"] for o in orders] == ["Ana Pop", "Studio X"]
    assert [o["status"] for o in orders] == ["placed", "in-progress"]
    assert "dueDate" in orders[0]


def test_add_order_goes_first(client):
    resp = client.post("/api/orders/", json={"client": "Maria", "item": "Sign", "total": "99.5"})
    assert resp.status_code == 200
    order = resp.json()
    assert order["status"] == "placed"
    assert order["total"] == 99.5

    orders = client.get("/api/orders/").json()
    assert len(orders) == 3
    assert orders[0]["id"] == order["id"]


def test_add_order_requires_client_item_total(client, stores, kv):
    for body in (
        {"client": "", "item": "", "total": ""},
        {"client": "Maria", "item": "Sign"},
        {"client": "Maria", "total": "10"},
        {"item": "Sign", "total": "10"},
    ):
        resp = client.post("/api/orders/", json=body)
        assert resp.status_code == 400
        assert resp.json()["detail"]["title"] == "Fill in client, item and total"

    assert len(client.get("/api/orders/").json()) == 2
    stores.flush()
    assert kv.get("craftbiz/orders") is None


def test_advance_order_through_cycle(client):
    statuses = []
    for _ in range(4):
        resp = client.post("/api/orders/1/advance")
        assert resp.status_code == 200
        statuses.append(resp.json()["status"])
    assert statuses == ["in-progress", "delivered", "paid", "paid"]

    # Other orders are untouched
    orders = {o["id"]: o for o in client.get("/api/orders/").json()}
    assert orders["2"]["status"] == "in-progress"


def test_advance_unknown_order(client):
    assert client.post("/api/orders/404/advance").status_code == 404


# ============================================================
# 21-25. Replies
# ============================================================

def test_replies_start_with_defaults(client):
    replies = client.get("/api/replies/").json()
    assert [r["id"] for r in replies] == ["r1", "r2", "r3"]
    assert replies[0]["category"] == "Preț"


def test_add_reply_defaults_category(client):
    resp = client.post("/api/replies/", json={"a": "We ship in 2 days."})
    assert resp.status_code == 200
    reply = resp.json()
    assert reply["category"] == "General"
    assert reply["q"] == ""
    assert client.get("/api/replies/").json()[0]["id"] == reply["id"]


def test_add_reply_requires_answer(client):
    resp = client.post("/api/replies/", json={"q": "Cât costă?", "a": ""})
    assert resp.status_code == 400
    assert resp.json()["detail"]["title"] == "Fill in the answer"
    assert len(client.get("/api/replies/").json()) == 3


def test_share_reply_sends_answer_verbatim(client, share_sink):
    answer = client.get("/api/replies/").json()[0]["a"]
    resp = client.post("/api/replies/r1/share")
    assert resp.status_code == 200
    assert share_sink.sent == [answer]

    assert client.post("/api/replies/nope/share").status_code == 404


def test_share_reply_failure_becomes_notice(client):
    app.dependency_overrides[get_share_sink] = lambda: FailingShareSink()
    resp = client.post("/api/replies/r2/share")
    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["title"] == "Sharing failed"
    assert detail["message"] == "share sheet dismissed"


# ============================================================
# 26. Settings
# ============================================================

def test_settings_endpoint(client):
    resp = client.get("/api/settings/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["currency_suffix"] == "lei"
    assert body["default_client_name"] == "Client Nume SRL"
    assert len(body["roadmap"]) == 4


# ============================================================
# 27. Concurrent creates
# ============================================================

def _run_concurrently(create, threads=8, calls=30):
    with ThreadPoolExecutor(max_workers=threads) as pool:
        futures = [pool.submit(create) for _ in range(threads * calls)]
        return [f.result() for f in futures]


def test_concurrent_creates_get_distinct_ids(stores):
    presets = _run_concurrently(lambda: save_as_preset(Recipe(name="x"), stores))
    orders = _run_concurrently(lambda: create_order(OrderCreate(client="a", item="b", total=1), stores))
    replies = _run_concurrently(lambda: create_reply(ReplyCreate(a="ok"), stores))

    for created, collection, seeded in (
        (presets, stores.recipes, 1),
        (orders, stores.orders, 2),
        (replies, stores.replies, 3),
    ):
        ids = [item.id for item in collection.all()]
        assert len(ids) == len(created) + seeded
        assert len(set(ids)) == len(ids)
        assert {item.id for item in created} <= set(ids)
    assert all(p.id.startswith("preset-") for p in presets)
