from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

router = APIRouter(prefix="/publications", tags=["publications"])


class PublicationRequest(BaseModel):
    # список проверяется реестром, чтобы ошибка пришла как invalid-argument
    params: Any = Field(default_factory=list)


@router.get("/{name}")
async def read_publication(name: str, request: Request):
    """Разовое чтение публикации без параметров"""
    docs = await request.app.state.hub.snapshot(name, [])
    return {"name": name, "docs": docs}


@router.post("/{name}")
async def read_publication_with_params(name: str, body: PublicationRequest, request: Request):
    """Разовое чтение публикации с параметрами"""
    docs = await request.app.state.hub.snapshot(name, body.params)
    return {"name": name, "docs": docs}
