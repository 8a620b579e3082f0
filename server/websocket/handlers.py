from fastapi import WebSocket, WebSocketDisconnect
from core.session import session_manager
from core.config import BOARD_CREATION_TIME, DICTIONARY_DEV_MODE
from core.logging_config import get_logger
import uuid

logger = get_logger(__name__)


async def handle_websocket(ws: WebSocket):
    room_code = ws.query_params.get("room")
    rule = ws.query_params.get("rule")

    if not room_code or not rule:
        await ws.close()
        return

    await ws.accept()

    player_id = ws.query_params.get("player") or str(uuid.uuid4())
    duration = ws.query_params.get("duration")

    async def push_update(session):
        message = {
            "type": "TIME_UP" if session.is_frozen else "UPDATE",
            "state": session.to_dict(),
            "completion": session.completion(),
        }
        if session.is_frozen:
            # 확정된 보드 단어 (게임 단계에서 사용)
            message["words"] = session.board.words()
        await ws.send_json(message)

    session = session_manager.get_or_create_session(room_code, player_id, rule)
    session.on_change = push_update

    await ws.send_json({"type": "INIT", "playerId": player_id, "state": session.to_dict()})

    if duration is not None and session.clock is None and not session.is_frozen:
        try:
            seconds = float(duration)
        except ValueError:
            seconds = BOARD_CREATION_TIME
        session.start_clock(seconds)

    try:
        while True:
            data = await ws.receive_json()
            msg_type = data.get("type")

            try:
                if msg_type == "EDIT":
                    session.edit(data["row"], data["col"], data.get("text", ""))
                elif msg_type == "FOCUS":
                    session.focus(data["row"], data["col"])
                elif msg_type == "BLUR":
                    session.blur(data["row"], data["col"])
                elif msg_type == "DEADLINE":
                    session.expire()
                elif msg_type == "LOAD" and DICTIONARY_DEV_MODE:
                    session.load_words(data["words"])
                else:
                    await ws.send_json({"type": "ERROR", "message": f"Unknown message type: {msg_type}"})
                    continue
            except (KeyError, IndexError, TypeError, ValueError) as e:
                logger.debug(f"Bad {msg_type} message from {player_id}: {e}")
                await ws.send_json({"type": "ERROR", "message": f"Invalid {msg_type} message"})
                continue

            await push_update(session)

    except WebSocketDisconnect:
        logger.debug(f"WebSocket disconnected: {player_id}")
        session_manager.remove_session(room_code, player_id)
