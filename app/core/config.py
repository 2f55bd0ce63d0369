import os
from dotenv import load_dotenv

load_dotenv()  # Load from .env file

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./mindcare.db")

# "live" reads and writes the database, "fixtures" serves read-only sample data
DATA_SOURCE = os.getenv("DATA_SOURCE", "live").strip().lower()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Hosted auth provider (bearer JWTs)
AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET")
AUTH_JWT_ALGORITHM = os.getenv("AUTH_JWT_ALGORITHM", "HS256")
AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE")
ADMIN_EMAILS = [
    email.strip().lower()
    for email in os.getenv("ADMIN_EMAILS", "").split(",")
    if email.strip()
]

# CORS
FRONTEND_ORIGINS = [
    origin.strip()
    for origin in os.getenv("FRONTEND_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# Chat completion backend
CHAT_PROVIDER = os.getenv("CHAT_PROVIDER", "together")  # "together" or "openai"
CHAT_API_URL = os.getenv("CHAT_API_URL", "https://api.together.xyz/v1/completions")
CHAT_API_KEY = os.getenv("CHAT_API_KEY")
CHAT_MODEL = os.getenv("CHAT_MODEL", "Llama-4-Maverick-Instruct-17B-128E")
CHAT_TIMEOUT_SECONDS = float(os.getenv("CHAT_TIMEOUT_SECONDS", "30"))

# OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_CHAT_MODEL = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")

# Journal recordings
AUDIO_STORAGE_DIR = os.getenv("AUDIO_STORAGE_DIR", "./recordings")
MAX_RECORDING_BYTES = int(os.getenv("MAX_RECORDING_BYTES", str(10 * 1024 * 1024)))
