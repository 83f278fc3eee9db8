"""
Quick-reply library endpoints.

GET  /api/replies/                  canned replies, newest first
POST /api/replies/                  add a reply (answer required)
POST /api/replies/{id}/share        send the answer text, unchanged, to the share sink
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from .. import schemas
from ..dependencies import get_share_sink, get_stores
from ..stores import StoreRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/replies", tags=["replies"])


@router.get("/", response_model=List[schemas.Reply])
def list_replies(stores: StoreRegistry = Depends(get_stores)):
    return stores.replies.all()


@router.post("/", response_model=schemas.Reply)
def create_reply(reply: schemas.ReplyCreate, stores: StoreRegistry = Depends(get_stores)):
    if not reply.a:
        raise HTTPException(
            status_code=400,
            detail=schemas.Notice(title="Fill in the answer").model_dump(),
        )
    return stores.replies.add(lambda new_id: schemas.Reply(
        id=new_id,
        q=reply.q,
        a=reply.a,
        category=reply.category,
    ))


@router.post("/{reply_id}/share", response_model=schemas.ShareResult)
def share_reply(
    reply_id: str,
    stores: StoreRegistry = Depends(get_stores),
    sink=Depends(get_share_sink),
):
    reply = stores.replies.get(reply_id)
    if not reply:
        raise HTTPException(status_code=404, detail="Reply not found")
    try:
        sink.share(reply.a)
    except Exception as e:
        logger.warning("Sharing reply %s failed: %s", reply_id, e)
        raise HTTPException(
            status_code=502,
            detail=schemas.Notice(title="Sharing failed", message=str(e)).model_dump(),
        )
    return schemas.ShareResult(text=reply.a)
