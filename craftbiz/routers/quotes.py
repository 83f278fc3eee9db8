"""
Offer endpoints.

POST /api/quotes/message  returns the plain-text offer
POST /api/quotes/share    sends the plain-text offer to the share sink
POST /api/quotes/html     returns the offer card as HTML
POST /api/quotes/pdf      downloads the offer as a PDF
POST /api/quotes/export   writes the PDF and hands it to the file share sink,
                          or reports the file path when sharing is unavailable

Share/export failures come back as 502 with a Notice carrying str(error).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, Response

from .. import schemas
from ..config import settings
from ..dependencies import (
    get_document_renderer,
    get_file_share_sink,
    get_pricing_engine,
    get_share_sink,
)
from ..pdf_generator import generate_quote_pdf
from ..pricing_engine import PricingEngine
from ..quote_renderer import build_quote_document, build_share_message, render_html
from ..sharing import PDF_MIME_TYPE, PDF_UTI, slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])


def _client_name(req: schemas.QuoteRequest) -> str:
    return settings.DEFAULT_CLIENT_NAME if req.client is None else req.client


def _notice(status_code: int, title: str, error: Exception) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=schemas.Notice(title=title, message=str(error)).model_dump(),
    )


def _document(req: schemas.QuoteRequest, engine: PricingEngine):
    breakdown = engine.breakdown(req.recipe)
    return build_quote_document(req.recipe, breakdown, _client_name(req))


@router.post("/message", response_model=schemas.QuoteMessage)
def offer_message(req: schemas.QuoteRequest, engine: PricingEngine = Depends(get_pricing_engine)):
    breakdown = engine.breakdown(req.recipe)
    return schemas.QuoteMessage(message=build_share_message(req.recipe, breakdown, _client_name(req)))


@router.post("/share", response_model=schemas.ShareResult)
def share_offer(
    req: schemas.QuoteRequest,
    engine: PricingEngine = Depends(get_pricing_engine),
    sink=Depends(get_share_sink),
):
    breakdown = engine.breakdown(req.recipe)
    message = build_share_message(req.recipe, breakdown, _client_name(req))
    try:
        sink.share(message)
    except Exception as e:
        logger.warning("Sharing offer failed: %s", e)
        raise _notice(502, "Could not share", e)
    return schemas.ShareResult(text=message)


@router.post("/html", response_class=HTMLResponse)
def offer_html(req: schemas.QuoteRequest, engine: PricingEngine = Depends(get_pricing_engine)):
    return HTMLResponse(content=render_html(_document(req, engine)))


@router.post("/pdf")
def offer_pdf(req: schemas.QuoteRequest, engine: PricingEngine = Depends(get_pricing_engine)):
    """Generate and download the offer PDF. Returns: application/pdf"""
    document = _document(req, engine)
    try:
        pdf_bytes = generate_quote_pdf(document, shop_name=settings.SHOP_NAME or "")
    except Exception as e:
        logger.warning("PDF generation failed: %s", e)
        raise _notice(502, "Could not generate PDF", e)

    filename = f"Offer-{slugify(req.recipe.name)}.pdf"
    return Response(
        content=pdf_bytes,
        media_type=PDF_MIME_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )


@router.post("/export", response_model=schemas.ExportResult)
def export_offer(
    req: schemas.QuoteRequest,
    engine: PricingEngine = Depends(get_pricing_engine),
    renderer=Depends(get_document_renderer),
    file_sink=Depends(get_file_share_sink),
):
    document = _document(req, engine)
    try:
        path = renderer.render(document)
        if not file_sink.is_available():
            return schemas.ExportResult(
                shared=False,
                path=str(path),
                notice=schemas.Notice(title="PDF created", message=str(path)),
            )
        file_sink.share_file(path, PDF_MIME_TYPE, PDF_UTI)
    except Exception as e:
        logger.warning("Offer export failed: %s", e)
        raise _notice(502, "Could not generate PDF", e)
    return schemas.ExportResult(shared=True, path=str(path))
