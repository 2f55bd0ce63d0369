import logging

from app.admin import routes as admin_router
from app.appointments import routes as appointments_router
from app.auth import routes as auth_router
from app.chat import routes as chat_router
from app.gamification import routes as gamification_router
from app.journals import routes as journals_router
from app.moderation import routes as moderation_router
from app.moods import routes as moods_router
from app.profiles import routes as profiles_router
from app.therapists import routes as therapists_router
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import FRONTEND_ORIGINS, LOG_LEVEL
from app.core.database import Base, SessionLocal, engine
from app.moderation.db import seed_chat_rules

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="MindCare API",
    version="1.0.0",
    description="Backend for MindCare: mood tracking, journaling, AI chat support, therapist booking and moderation.",
)

# CORS config
app.add_middleware(
    CORSMiddleware,
    allow_origins=FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth_router.router)
app.include_router(profiles_router.router)
app.include_router(moods_router.router)
app.include_router(journals_router.router)
app.include_router(chat_router.router)
app.include_router(gamification_router.router)
app.include_router(therapists_router.router)
app.include_router(appointments_router.router)
app.include_router(moderation_router.router)
app.include_router(admin_router.router)


# DB Tables
@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        added = seed_chat_rules(db)
        if added:
            logger.info(f"Seeded {added} community guidelines")
    finally:
        db.close()


@app.get("/health", tags=["System"])
def health():
    return {"status": "ok"}
