# teamcode/routers/ws_router.py
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from teamcode.core.dependencies import get_notifier
from teamcode.core.notifier import ChangeNotifier, QueueSubscriber
from teamcode.core.ws.ws_actions import handle_action

logger = logging.getLogger(__name__)

router = APIRouter()


async def forward_events(
    websocket: WebSocket,
    subscriber: QueueSubscriber,
    notifier: ChangeNotifier,
    token: int,
):
    """
    Push every event the notifier hands us to the client, in order.
    A failed send unsubscribes the socket so its queue stops growing.
    """
    while True:
        event = await subscriber.get()
        try:
            await websocket.send_json(event)
        except Exception as e:
            logger.warning("Failed to send %s event to observer %s: %s", event.get("type"), token, e)
            notifier.unsubscribe(token)
            return


@router.websocket("/ws")
async def code_events_ws(
    websocket: WebSocket,
    team_id: Optional[int] = None,
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """
    Observer socket for commit and revert events.
      1) Accepts and subscribes to the notifier (one team, or all teams).
      2) Forwards events as JSON while answering client actions.
      3) On disconnect, unsubscribes. Events emitted meanwhile are lost.
    """
    await websocket.accept()

    subscriber = QueueSubscriber()
    token = notifier.subscribe(subscriber, team_id=team_id)
    sender = asyncio.create_task(forward_events(websocket, subscriber, notifier, token))

    try:
        while True:
            raw_data = await websocket.receive_text()
            await handle_action(websocket, raw_data)
    except WebSocketDisconnect:
        logger.info("Observer %s disconnected", token)
    finally:
        notifier.unsubscribe(token)
        sender.cancel()
