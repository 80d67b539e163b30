# teamcode/core/ws/ws_actions.py
import json

from fastapi import WebSocket


async def handle_action(websocket: WebSocket, raw_data: str):
    """
    Reads raw_data, parses JSON, checks 'action' key and answers it.

    Observers only listen, so the single supported action is a keepalive.
    """
    try:
        message_data = json.loads(raw_data)
    except json.JSONDecodeError:
        message_data = None

    if not isinstance(message_data, dict) or "action" not in message_data:
        await websocket.send_json({"error": "Expected a JSON object with an 'action' key."})
        return

    action = message_data["action"]
    if action == "ping":
        await websocket.send_json({"action": "pong"})
    else:
        await websocket.send_json({"error": f"Unknown action: {action}"})
