import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ValidationError

# Paths
BASE_DIR = Path(__file__).parent
STATIC_DIR = BASE_DIR / "static"

# Load environment variables from .env before reading any config
load_dotenv(BASE_DIR / ".env")

from game.config import GameConfig, load_config  # noqa: E402
from game.engine import SnakeGame  # noqa: E402
from game.loop import PlayLoop  # noqa: E402
from game.milestones import MilestoneMessageService  # noqa: E402

logger = logging.getLogger(__name__)

app = FastAPI(title="Snake Ultra")
app.state.config = load_config()


class ClientMessage(BaseModel):
    """Message sent by the browser over the game WebSocket."""

    type: str
    action: Optional[str] = None


@app.get("/")
async def serve_index():
    """Serve the main index.html file."""
    index_path = STATIC_DIR / "index.html"
    if index_path.exists():
        return FileResponse(index_path)
    return {"error": "index.html not found"}


@app.get("/config")
async def get_config():
    """Return the active game configuration."""
    return app.state.config.to_dict()


@app.get("/health")
async def health():
    return {"status": "ok"}


class GameSession:
    """Manages a single game session."""

    def __init__(self, websocket: WebSocket, config: GameConfig):
        self.websocket = websocket
        self.game = SnakeGame(config=config)
        self.milestones = MilestoneMessageService(model=config.milestone_model)
        self.loop: Optional[PlayLoop] = None
        self.game_task: Optional[asyncio.Task] = None

    async def send(self, message: dict) -> None:
        await self.websocket.send_json(message)

    async def stop(self) -> None:
        """Stop the play loop and its pending milestone work."""
        if self.loop is not None:
            await self.loop.stop()
        if self.game_task and not self.game_task.done():
            self.game_task.cancel()
            try:
                await self.game_task
            except asyncio.CancelledError:
                pass
        self.game_task = None

    async def start(self) -> None:
        """Replace the game state with a fresh run and start the play loop."""
        await self.stop()
        self.game.reset()
        self.loop = PlayLoop(self.game, self.send, milestones=self.milestones)
        await self.loop.publish_state()
        self.game_task = asyncio.create_task(self.loop.run())

    async def send_state(self) -> None:
        await self.send({
            "type": "state_update",
            "state": self.game.get_state().to_dict(),
            "interval_ms": self.game.interval_ms,
            "milestone_text": self.loop.milestone_text if self.loop else "",
        })


async def handle_message(session: GameSession, message: ClientMessage) -> None:
    """Apply one client message to the session."""
    if message.type in ("start_game", "reset"):
        await session.start()

    elif message.type == "action":
        # Only the pending slot is written; the play loop applies it on the next tick
        session.game.submit_direction(message.action or "")

    elif message.type == "toggle_info":
        session.game.toggle_info()
        await session.send_state()

    else:
        logger.debug("Ignoring unknown message type %r", message.type)


@app.websocket("/ws/game")
async def websocket_game(websocket: WebSocket):
    """WebSocket endpoint for real-time game communication."""
    await websocket.accept()

    session = GameSession(websocket, app.state.config)
    await session.send_state()

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = ClientMessage.model_validate(json.loads(data))
            except (json.JSONDecodeError, ValidationError) as e:
                logger.debug("Ignoring malformed message: %s", e)
                continue

            await handle_message(session, message)

    except WebSocketDisconnect:
        pass
    finally:
        await session.stop()


# Mount static files (after all routes)
if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


def find_available_port(start_port: int = 8000, max_attempts: int = 100) -> int:
    """Find an available port starting from start_port.

    Args:
        start_port: Port number to start searching from
        max_attempts: Maximum number of ports to try

    Returns:
        An available port number

    Raises:
        RuntimeError: If no available port is found
    """
    import socket

    for port in range(start_port, start_port + max_attempts):
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind(("0.0.0.0", port))
                return port
        except OSError:
            continue

    raise RuntimeError(f"No available port found in range {start_port}-{start_port + max_attempts - 1}")


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    default_port = 8000
    port = int(os.environ.get("PORT", 0)) or find_available_port(default_port)

    if port != default_port:
        logger.info("Port %d is in use, using port %d instead", default_port, port)

    logger.info("Starting server at http://localhost:%d", port)
    uvicorn.run(app, host="0.0.0.0", port=port)
