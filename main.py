"""
FastAPI WebRTC Signaling Relay
Brokers session descriptions, ICE candidates and chat between peers in shared rooms
"""

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import time
import uuid
import uvicorn

from signaling import (
    RoomManager,
    RateLimiter,
    RelayDispatcher,
    QueueChannel,
    StreamHandler,
    decode_frame,
    get_logger,
    log_security_event,
    log_system_event,
    validate_config,
    HOST,
    PORT,
    CORS_ORIGINS,
    SERVICE_NAME,
    VERSION,
    MAX_ROOM_SIZE,
    RATE_LIMIT_WINDOW_MS,
    RATE_LIMIT_MAX_EVENTS,
    SOCKET_PING_INTERVAL,
    SOCKET_PING_TIMEOUT,
    LOG_LEVEL,
    EVENT_ERROR
)

# Fail fast on a bad deployment
validate_config()

# Global instances
room_manager = RoomManager()
rate_limiter = RateLimiter()
dispatcher = RelayDispatcher(room_manager)
logger = get_logger()
started_at = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    log_system_event("startup", f"{SERVICE_NAME} starting | max_room_size={MAX_ROOM_SIZE} | "
                                f"rate_limit={RATE_LIMIT_MAX_EVENTS}/{RATE_LIMIT_WINDOW_MS}ms")

    yield

    log_system_event("shutdown", f"{SERVICE_NAME} shutting down | "
                                 f"open_connections={dispatcher.connection_count()}")


app = FastAPI(
    title=SERVICE_NAME,
    description="Room-based WebRTC signaling relay over WebSocket",
    version=VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": _utc_now(),
        "uptime_seconds": round(time.time() - started_at, 3),
        "version": VERSION
    }


@app.get("/api/status")
async def get_status():
    """Relay status: live connections and rooms"""
    try:
        return {
            "service": SERVICE_NAME,
            "status": "operational",
            "timestamp": _utc_now(),
            "active_connections": dispatcher.connection_count(),
            "rooms": await room_manager.room_count()
        }
    except Exception as e:
        logger.error(f"Status endpoint failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to get status")


@app.websocket("/stream")
async def stream_endpoint(websocket: WebSocket):
    """Signaling endpoint: one StreamHandler per connection"""
    await websocket.accept()

    connection_id = uuid.uuid4().hex
    client_ip = websocket.client.host if websocket.client else "unknown"

    channel = QueueChannel(connection_id, websocket.send_text)
    channel.start()
    dispatcher.register(connection_id, channel)

    handler = StreamHandler(connection_id, room_manager, rate_limiter, dispatcher)
    handler.connect()
    logger.info(f"WebSocket connection {connection_id} from {client_ip}")

    reason = "transport close"
    try:
        while True:
            raw = await websocket.receive_text()

            is_valid, event, data, error_msg = decode_frame(raw)
            if not is_valid:
                log_security_event("invalid_frame", {"conn": connection_id, "reason": error_msg})
                dispatcher.send_to_connection(connection_id, EVENT_ERROR, {"message": error_msg})
                continue

            await handler.handle(event, data)

    except WebSocketDisconnect as e:
        reason = f"client disconnect (code={e.code})"

    except Exception as e:
        reason = "transport error"
        logger.error(f"WebSocket error for {connection_id}: {e}")
        log_security_event("websocket_error", {"conn": connection_id, "client_ip": client_ip, "error": str(e)})

    finally:
        await handler.disconnect(reason)
        dispatcher.unregister(connection_id)
        await channel.close()


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}")
    log_security_event("unhandled_exception", {
        "path": str(request.url),
        "error": str(exc)
    })
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


if __name__ == "__main__":
    logger.info(f"Starting {SERVICE_NAME} on {HOST}:{PORT}")

    uvicorn.run(
        "main:app",
        host=HOST,
        port=PORT,
        reload=False,
        log_level=LOG_LEVEL.lower(),
        access_log=True,
        ws_ping_interval=SOCKET_PING_INTERVAL,
        ws_ping_timeout=SOCKET_PING_TIMEOUT,
    )
