# booking_assistant/main.py
import asyncio
from datetime import timedelta
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from booking_assistant.routers import chatbot
from booking_assistant.db.mongo import client, verify_mongodb_connection
from booking_assistant.core.config import settings
from booking_assistant.core.logger import logger
from booking_assistant.services.chatbot_engine import build_chatbot_engine
from booking_assistant.services.session_store import MongoSessionStore, run_sweeper
from booking_assistant.utils.responses import format_error_response


app = FastAPI(
    title="Booking Assistant",
    version="0.1.0",
    description="Conversational assistant for finding doctors and booking appointments",
)

# ✅ CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ✅ Startup/shutdown
@app.on_event("startup")
async def startup():
    await verify_mongodb_connection()

    engine = build_chatbot_engine()
    if isinstance(engine.store, MongoSessionStore):
        await engine.store.ensure_indexes()
    app.state.chatbot = engine

    app.state.session_sweeper = asyncio.create_task(
        run_sweeper(
            engine.store,
            max_idle=timedelta(minutes=settings.SESSION_IDLE_MINUTES),
            interval_seconds=settings.SESSION_SWEEP_INTERVAL_SECONDS,
        )
    )
    logger.info("Booking assistant started (session backend: %s)", settings.SESSION_BACKEND)

@app.on_event("shutdown")
async def shutdown():
    sweeper = getattr(app.state, "session_sweeper", None)
    if sweeper is not None:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
    client.close()

# ✅ Health check
@app.get("/", tags=["root"], summary="Health check")
async def root():
    return {"status": "ok", "service": "Booking Assistant"}

# ✅ Error handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error_response(exc, status_code=exc.status_code),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=format_error_response(exc, status_code=422),
    )

@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content=format_error_response(exc),
    )

# ✅ Routes
app.include_router(chatbot.router, prefix="/chatbot")
