"""FastAPI application entry point for the chart chat API.

This module initializes the FastAPI application, configures CORS middleware,
and loads the prompt documents and dataset on startup.

To run locally:
    uvicorn main:app --reload
"""
from __future__ import annotations

from dotenv import load_dotenv
load_dotenv()  # Load .env file before other imports

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router as api_router
from config import settings
from dataset import load_dataset
from services.llm.prompts import load_greeting, load_system_prompt

app = FastAPI(
    title="Chart Chat",
    description="Exploratory data analysis through LLM tool calls, without sharing the data",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.on_event("startup")
async def startup() -> None:
    """Read the prompt documents and the dataset once, failing fast if missing."""
    load_system_prompt()
    load_greeting()
    df = load_dataset()
    print(f"[API] Loaded dataset with {len(df)} rows and {len(df.columns)} columns")


@app.get("/healthcheck")
async def healthcheck() -> dict:
    """Health check endpoint.

    Returns:
        Dict with status "ok" if the service is running.
    """
    return {"status": "ok"}
