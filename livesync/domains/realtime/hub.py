"""
Хаб живых подписок.

Хранит подписки всех подключений и после каждого метода, изменившего
коллекцию, заново исполняет наблюдающие ее запросы. Клиент получает
сообщение changed только если набор документов действительно изменился.
"""

import asyncio
import itertools
import logging
from typing import Any, Awaitable, Callable, Dict, List

from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import sessionmaker

from livesync.core.errors import ConnectionClosed, InvalidArgument
from livesync.domains.realtime.live_query import LiveQuery
from livesync.domains.realtime.registry import Registry

logger = logging.getLogger(__name__)

SendCallable = Callable[[Dict[str, Any]], Awaitable[None]]


class Subscription:
    def __init__(self, sub_id: str, name: str, query: LiveQuery):
        self.sub_id = sub_id
        self.name = name
        self.query = query
        self.last_docs: List[Dict[str, Any]] = []
        # чтение, сравнение и отправка идут под одной блокировкой,
        # чтобы более старый результат не перезаписал новый
        self.lock = asyncio.Lock()


class Connection:
    """Одно подключение клиента и его подписки"""

    _ids = itertools.count(1)

    def __init__(self, send: SendCallable):
        self.id = next(self._ids)
        self._send = send
        self._lock = asyncio.Lock()
        self.subscriptions: Dict[str, Subscription] = {}
        self.closed = False

    async def send(self, message: Dict[str, Any]) -> None:
        # сообщения в одно соединение уходят строго по очереди
        async with self._lock:
            await self._send(jsonable_encoder(message))


class SubscriptionHub:
    """Управление подписками и вызовами методов"""

    def __init__(self, registry: Registry, session_factory: sessionmaker):
        self.registry = registry
        self.session_factory = session_factory
        self.connections: Dict[int, Connection] = {}

    def connect(self, send: SendCallable) -> Connection:
        connection = Connection(send)
        self.connections[connection.id] = connection
        logger.info(f"Connection {connection.id} opened")
        return connection

    def disconnect(self, connection: Connection) -> None:
        connection.closed = True
        connection.subscriptions.clear()
        self.connections.pop(connection.id, None)
        logger.info(f"Connection {connection.id} closed")

    async def subscribe(
        self,
        connection: Connection,
        sub_id: str,
        name: str,
        params: Any
    ) -> List[Dict[str, Any]]:
        """Оформление подписки; возвращает начальный набор документов"""
        if connection.closed:
            raise ConnectionClosed(connection.id)
        if not isinstance(sub_id, str) or not sub_id:
            raise InvalidArgument("subscription_id_type", [
                {"loc": ["id"], "msg": "Subscription id should be a non-empty string", "type": "subscription_id_type"}
            ])
        if sub_id in connection.subscriptions:
            raise InvalidArgument("duplicate_subscription", [
                {"loc": ["id"], "msg": f"Subscription {sub_id} already exists", "type": "duplicate_subscription"}
            ])
        query = self.registry.publish(name, params)
        async with self.session_factory() as session:
            docs = jsonable_encoder(await query.fetch(session))

        if connection.closed:
            raise ConnectionClosed(connection.id)
        subscription = Subscription(sub_id, name, query)
        subscription.last_docs = docs
        connection.subscriptions[sub_id] = subscription
        logger.info(f"Connection {connection.id} subscribed to {name} as {sub_id}")
        return docs

    def unsubscribe(self, connection: Connection, sub_id: str) -> bool:
        subscription = connection.subscriptions.pop(sub_id, None)
        if subscription is None:
            return False
        logger.info(f"Connection {connection.id} unsubscribed from {subscription.name}")
        return True

    async def snapshot(self, name: str, params: Any) -> List[Dict[str, Any]]:
        """Разовое чтение публикации без подписки"""
        query = self.registry.publish(name, params)
        async with self.session_factory() as session:
            return await query.fetch(session)

    async def call(self, name: str, params: Any) -> Any:
        """Вызов метода в отдельной сессии с последующим обновлением подписок"""
        definition = self.registry.get_method(name)
        async with self.session_factory() as session:
            result = await self.registry.call(name, session, params)

        if definition.invalidates:
            await self.invalidate(definition.invalidates)
        return result

    async def invalidate(self, collection: str) -> None:
        """Повторное исполнение подписок, наблюдающих коллекцию"""
        for connection in list(self.connections.values()):
            for subscription in list(connection.subscriptions.values()):
                if not subscription.query.observes(collection):
                    continue
                try:
                    await self._refresh(connection, subscription)
                except Exception:
                    # запись уже применена, сбой обновления не должен ее отменять
                    logger.exception(
                        f"Refresh of {subscription.name} ({subscription.sub_id}) "
                        f"on connection {connection.id} failed"
                    )

    async def _refresh(self, connection: Connection, subscription: Subscription) -> None:
        async with subscription.lock:
            async with self.session_factory() as session:
                docs = jsonable_encoder(await subscription.query.fetch(session))

            if docs == subscription.last_docs:
                return
            # подписка могла быть отменена, пока шел запрос
            if connection.subscriptions.get(subscription.sub_id) is not subscription:
                return

            subscription.last_docs = docs
            try:
                await connection.send({
                    "type": "changed",
                    "data": {"id": subscription.sub_id, "docs": docs},
                })
            except Exception as e:
                logger.warning(f"Dropping connection {connection.id}: {e}")
                self.disconnect(connection)
