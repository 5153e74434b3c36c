from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://webarchive:webarchive@db:5432/webarchive")
    BLOB_DIR = getenv("BLOB_DIR", "./blobs")
    TOKEN_CACHE_TTL_SECONDS = int(getenv("TOKEN_CACHE_TTL_SECONDS", "600"))  # 10 minutes
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
