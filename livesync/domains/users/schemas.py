from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic_core import PydanticCustomError


def parse_iso_timestamp(value: str) -> datetime:
    """Разбор строки ISO-8601; суффикс Z означает UTC"""
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise PydanticCustomError("timestamp_type", "Expected an ISO-8601 timestamp") from None


def coerce_timestamp(value: Any) -> Any:
    """Приведение временной метки из формата клиента

    Принимает datetime, строку ISO-8601 и EJSON-объект {"$date": <мс>}.
    Голые числа, строки из цифр и bool отклоняются: это не временная метка.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return parse_iso_timestamp(value)
    if isinstance(value, dict) and set(value) == {"$date"}:
        millis = value["$date"]
        if isinstance(millis, (int, float)) and not isinstance(millis, bool):
            try:
                return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                raise PydanticCustomError("timestamp_type", "Timestamp is out of range") from None
    raise PydanticCustomError("timestamp_type", "Expected a timestamp, got {kind}", {"kind": type(value).__name__})


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        raise PydanticCustomError("timestamp_type", "Timestamp is out of range") from None


class UserCreate(BaseModel):
    """Схема для создания пользователя: ровно name и createdAt"""
    name: StrictStr
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(extra="forbid")

    @field_validator("created_at", mode="before")
    @classmethod
    def validate_created_at(cls, v):
        return coerce_timestamp(v)

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v):
        return ensure_utc(v)


class UserModifier(BaseModel):
    """Модификатор частичного обновления

    Обязателен объект под ключом $set. Остальные ключи допускаются, но не
    применяются. Существование полей из $set в схеме не проверяется.
    """
    set_: Dict[str, Any] = Field(..., alias="$set")

    model_config = ConfigDict(extra="allow")

    @field_validator("set_")
    @classmethod
    def validate_name(cls, v):
        if "name" in v and not isinstance(v["name"], str):
            raise PydanticCustomError("string_type", "Input should be a valid string")
        return v

    @property
    def operators(self) -> Dict[str, Any]:
        """Операторы модификатора помимо $set"""
        return dict(self.model_extra or {})
