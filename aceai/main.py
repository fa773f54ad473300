# FastAPI entry point; wires the knowledge, quiz and plan routers
# aceai/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aceai.endpoints import (
    knowledge as knowledge_router,
    plans as plans_router,
    quizzes as quizzes_router,
)
from aceai.state_manager import knowledge_base
from aceai.utils.db import engine, init_db
from aceai.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    logger.info("AceAI API starting up...")

    # Create or upgrade the knowledge store schema
    await init_db(engine)

    logger.info("Loading knowledge base...")
    await knowledge_base.load()
    logger.info(
        f"Knowledge base ready: {len(knowledge_base.questions)} questions, "
        f"{len(knowledge_base.syllabuses)} syllabuses."
    )

    logger.info("Startup complete.")
    yield
    # On shutdown
    logger.info("AceAI API shutting down...")
    await engine.dispose()


# --- FastAPI App Initialization ---
app = FastAPI(
    title="AceAI Study Assistant API",
    description="Question bank, syllabus import, quiz generation and AI grading.",
    version="0.1.0",
    lifespan=lifespan,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Routers ---
app.include_router(knowledge_router.router, prefix="/knowledge", tags=["Knowledge"])
app.include_router(quizzes_router.router, prefix="/quizzes", tags=["Quizzes"])
app.include_router(plans_router.router, prefix="/plans", tags=["Plans"])


# --- Root Endpoint ---
@app.get("/")
async def root():
    return {"message": "Welcome to the AceAI Study Assistant API"}
