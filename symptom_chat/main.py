from contextlib import asynccontextmanager

from fastapi import FastAPI

from symptom_chat.api import chat
from symptom_chat.db.session import init_db
from symptom_chat.logging import setup_logging
from symptom_chat.settings import load_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(load_settings().log_level)
    await init_db()
    yield


app = FastAPI(title="Symptom Chat API", lifespan=lifespan)

app.include_router(chat.router)
