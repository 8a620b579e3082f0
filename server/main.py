from fastapi import FastAPI, WebSocket
from api.routes import router
from websocket.handlers import handle_websocket
from core.config import HOST, PORT
from core.session import session_manager
from core.logging_config import get_logger

logger = get_logger(__name__)

app = FastAPI(title="Chosung Bingo")
app.include_router(router)


@app.on_event("startup")
async def startup():
    logger.info(f"Chosung Bingo board server ready on {HOST}:{PORT}")


@app.on_event("shutdown")
async def shutdown():
    for room_code, player_id in list(session_manager.sessions.keys()):
        session_manager.remove_session(room_code, player_id)


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await handle_websocket(ws)
