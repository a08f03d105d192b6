from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://linkshelf:linkshelf@db:5432/linkshelf")

    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "15"))  #expire au bout de 15 minutes
    JWT_REFRESH_EXPIRE_MIN = int(getenv("JWT_REFRESH_EXPIRE_MIN", "43200"))  #expire au bout d'1 mois

    # Gemini: sans clé, la classification passe en mode dégradé
    GEMINI_API_KEY = getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = getenv("GEMINI_MODEL", "gemini-2.0-flash")
    GEMINI_BASE_URL = getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")

    FETCH_TIMEOUT = int(getenv("FETCH_TIMEOUT", "10"))
    AI_TIMEOUT = int(getenv("AI_TIMEOUT", "30"))

    CORS_ORIGINS = [o.strip() for o in getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

settings = Settings()
