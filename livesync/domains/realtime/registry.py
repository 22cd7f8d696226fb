"""
Таблица регистрации методов и публикаций.

Каждое имя сопоставлено обработчику и списку проверок параметров. Таблица
заполняется один раз при инициализации приложения (см. build_registry) и
после freeze() доступна только на чтение.

Параметры приходят от недоверенного клиента, поэтому обработчик никогда не
вызывается до того, как все параметры прошли проверку.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from livesync.core.errors import InvalidArgument, MethodNotFound, PublicationNotFound
from livesync.domains.realtime.live_query import LiveQuery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MethodDefinition:
    name: str
    handler: Callable[..., Awaitable[Any]]
    params: Tuple[TypeAdapter, ...]
    # Коллекция, подписки на которую нужно обновить после вызова
    invalidates: Optional[str] = None


@dataclass(frozen=True)
class PublicationDefinition:
    name: str
    handler: Callable[..., LiveQuery]
    params: Tuple[TypeAdapter, ...]


def _error_entries(exc: ValidationError, index: int) -> List[Dict[str, Any]]:
    return [
        {
            "loc": [index, *error["loc"]],
            "msg": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors(include_url=False, include_context=False, include_input=False)
    ]


def validate_params(params: Any, validators: Sequence[TypeAdapter]) -> List[Any]:
    """Проверка позиционных параметров вызова

    Raises:
        InvalidArgument: если параметров не столько, сколько объявлено,
            или хотя бы один не прошел проверку.
    """
    if not isinstance(params, (list, tuple)):
        raise InvalidArgument("params_type", [
            {"loc": [], "msg": "Params should be a list", "type": "params_type"}
        ])
    if len(params) < len(validators):
        raise InvalidArgument("missing_argument", [
            {"loc": [index], "msg": "Argument is required", "type": "missing_argument"}
            for index in range(len(params), len(validators))
        ])
    if len(params) > len(validators):
        raise InvalidArgument("unexpected_argument", [
            {"loc": [index], "msg": "Unexpected argument", "type": "unexpected_argument"}
            for index in range(len(validators), len(params))
        ])

    validated = []
    errors: List[Dict[str, Any]] = []
    for index, (value, adapter) in enumerate(zip(params, validators)):
        try:
            validated.append(adapter.validate_python(value))
        except ValidationError as exc:
            errors.extend(_error_entries(exc, index))

    if errors:
        raise InvalidArgument(errors[0]["type"], errors)
    return validated


class Registry:
    """Реестр методов и публикаций"""

    def __init__(self):
        self._methods: Dict[str, MethodDefinition] = {}
        self._publications: Dict[str, PublicationDefinition] = {}
        self._frozen = False

    def method(self, name: str, *param_types: Any, invalidates: Optional[str] = None):
        """Декоратор регистрации метода под именем name"""
        def decorator(handler):
            self._ensure_writable(name)
            if name in self._methods:
                raise ValueError(f"Method '{name}' is already registered")
            self._methods[name] = MethodDefinition(
                name=name,
                handler=handler,
                params=tuple(TypeAdapter(t) for t in param_types),
                invalidates=invalidates,
            )
            return handler
        return decorator

    def publication(self, name: str, *param_types: Any):
        """Декоратор регистрации публикации под именем name"""
        def decorator(handler):
            self._ensure_writable(name)
            if name in self._publications:
                raise ValueError(f"Publication '{name}' is already registered")
            self._publications[name] = PublicationDefinition(
                name=name,
                handler=handler,
                params=tuple(TypeAdapter(t) for t in param_types),
            )
            return handler
        return decorator

    def freeze(self) -> "Registry":
        self._frozen = True
        logger.info(
            "Registry frozen: %d methods, %d publications",
            len(self._methods), len(self._publications),
        )
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def methods(self) -> Mapping[str, MethodDefinition]:
        return MappingProxyType(self._methods)

    @property
    def publications(self) -> Mapping[str, PublicationDefinition]:
        return MappingProxyType(self._publications)

    def get_method(self, name: str) -> MethodDefinition:
        try:
            return self._methods[name]
        except KeyError:
            raise MethodNotFound(name) from None

    def get_publication(self, name: str) -> PublicationDefinition:
        try:
            return self._publications[name]
        except KeyError:
            raise PublicationNotFound(name) from None

    async def call(self, name: str, session: AsyncSession, params: Any) -> Any:
        """Вызов метода после проверки параметров"""
        definition = self.get_method(name)
        args = validate_params(params, definition.params)
        return await definition.handler(session, *args)

    def publish(self, name: str, params: Any) -> LiveQuery:
        """Построение живого запроса публикации"""
        definition = self.get_publication(name)
        args = validate_params(params, definition.params)
        return definition.handler(*args)

    def _ensure_writable(self, name: str) -> None:
        if self._frozen:
            raise RuntimeError(f"Registry is frozen, cannot register '{name}'")
