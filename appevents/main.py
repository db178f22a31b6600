# appevents/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import get_settings
from .api.endpoints import sessions

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = FastAPI(title="App Events Session Logger", version="1.0.0")

# CORS for local dashboards
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(sessions.router)

@app.get("/")
async def root():
    return {"message": "App Events Session Logger API", "version": "1.0.0"}

@app.get("/health")
async def health():
    return {"status": "healthy", "service": "appevents"}


def run():
    """Console entry point: serve the API with uvicorn"""
    import uvicorn

    uvicorn.run("appevents.main:app", host="0.0.0.0", port=8000)
