import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder

from livesync.core.errors import LiveSyncError
from livesync.domains.realtime.hub import Connection, SubscriptionHub

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR = {"error": "internal-error", "reason": "Internal server error"}


async def handle_message(hub: SubscriptionHub, connection: Connection, message: Dict[str, Any]) -> None:
    """Обработка одного сообщения клиента"""
    message_type = message.get("type")

    if message_type == "sub":
        sub_id = message.get("id")
        try:
            docs = await hub.subscribe(connection, sub_id, message.get("name"), message.get("params", []))
        except LiveSyncError as e:
            await connection.send({"type": "nosub", "data": {"id": sub_id, "error": e.to_dict()}})
            return
        except Exception:
            logger.exception(f"Subscription to {message.get('name')} failed")
            await connection.send({"type": "nosub", "data": {"id": sub_id, "error": INTERNAL_ERROR}})
            return
        await connection.send({"type": "ready", "data": {"id": sub_id, "docs": docs}})

    elif message_type == "unsub":
        sub_id = message.get("id")
        hub.unsubscribe(connection, sub_id)
        await connection.send({"type": "nosub", "data": {"id": sub_id}})

    elif message_type == "method":
        call_id = message.get("id")
        try:
            result = await hub.call(message.get("method"), message.get("params", []))
        except LiveSyncError as e:
            await connection.send({"type": "result", "data": {"id": call_id, "error": e.to_dict()}})
            return
        except Exception:
            # ошибки хранилища уходят клиенту непрозрачно
            logger.exception(f"Method {message.get('method')} failed")
            await connection.send({"type": "result", "data": {"id": call_id, "error": INTERNAL_ERROR}})
            return
        await connection.send({"type": "result", "data": {"id": call_id, "result": jsonable_encoder(result)}})

    elif message_type == "ping":
        # Ответ на ping для поддержания соединения
        await connection.send({"type": "pong"})

    else:
        await connection.send({
            "type": "error",
            "data": {"error": "unknown-message", "reason": f"Unknown message type: {message_type}"},
        })


@router.websocket("/sync")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket эндпоинт подписок и методов"""
    hub: SubscriptionHub = websocket.app.state.hub
    await websocket.accept()

    async def send(message: Dict[str, Any]) -> None:
        await websocket.send_text(json.dumps(message))

    connection = hub.connect(send)
    await connection.send({"type": "connected", "data": {"connection_id": connection.id}})

    try:
        while True:
            # Сообщения одного клиента обрабатываются строго по порядку
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await connection.send({
                    "type": "error",
                    "data": {"error": "malformed-message", "reason": "Message is not valid JSON"},
                })
                continue
            if not isinstance(message, dict):
                await connection.send({
                    "type": "error",
                    "data": {"error": "malformed-message", "reason": "Message should be an object"},
                })
                continue

            if not connection.closed:
                await handle_message(hub, connection, message)
            if connection.closed:
                # хаб отключил клиента после неудачной отправки
                logger.info(f"Closing websocket of dropped connection {connection.id}")
                await websocket.close(code=1011)
                return

    except WebSocketDisconnect:
        hub.disconnect(connection)

    except Exception as e:
        logger.error(f"WebSocket error: {e}")
        hub.disconnect(connection)
        raise
