"""
Ошибки слоя данных.

Все ошибки, которые можно вернуть клиенту, наследуются от LiveSyncError и
несут машиночитаемый код, HTTP-статус и детали. Ошибки хранилища сюда не
заворачиваются и уходят клиенту как непрозрачная ошибка сервера.
"""

from typing import Any, Dict, Iterable, List, Optional


class LiveSyncError(Exception):
    """Базовая ошибка, передаваемая клиенту

    Attributes:
        message: Текст ошибки
        code: Код для программной обработки
        status_code: HTTP-статус
        details: Дополнительный контекст
    """

    code = "livesync-error"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "reason": self.message, "details": self.details}


class InvalidArgument(LiveSyncError):
    """Аргументы метода или публикации не прошли проверку

    reason - тип первой ошибки (string_type, missing, extra_forbidden, ...),
    errors - все найденные ошибки с их расположением.
    """

    code = "invalid-argument"
    status_code = 400

    def __init__(self, reason: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(reason, details={"errors": errors or []})
        self.reason = reason
        self.errors = errors or []


class MethodNotFound(LiveSyncError):
    code = "method-not-found"
    status_code = 404

    def __init__(self, name: str) -> None:
        super().__init__(f"Method '{name}' not found", details={"name": name})
        self.name = name


class PublicationNotFound(LiveSyncError):
    code = "publication-not-found"
    status_code = 404

    def __init__(self, name: str) -> None:
        super().__init__(f"Publication '{name}' not found", details={"name": name})
        self.name = name


class SeedError(Exception):
    """Не удалось заполнить одну или несколько коллекций при старте"""

    def __init__(self, failures: Dict[str, BaseException]) -> None:
        names = ", ".join(sorted(failures))
        super().__init__(f"Seeding failed for: {names}")
        self.failures = failures

    @property
    def collections(self) -> Iterable[str]:
        return tuple(sorted(self.failures))


class ConnectionClosed(LiveSyncError):
    """Подключение уже отключено хабом"""

    code = "connection-closed"
    status_code = 410

    def __init__(self, connection_id: int) -> None:
        super().__init__(f"Connection {connection_id} is closed", details={"connection_id": connection_id})
        self.connection_id = connection_id
