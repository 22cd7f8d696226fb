from typing import Any

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

router = APIRouter(prefix="/methods", tags=["methods"])


class MethodCall(BaseModel):
    """Тело вызова метода: позиционные параметры"""
    # список проверяется реестром, чтобы ошибка пришла как invalid-argument
    params: Any = Field(default_factory=list)


@router.post("/{name}")
async def call_method(name: str, call: MethodCall, request: Request):
    """Вызов метода по имени"""
    hub = request.app.state.hub
    result = await hub.call(name, call.params)
    return {"result": jsonable_encoder(result)}
