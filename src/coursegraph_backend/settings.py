import os
import threading

class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        # Database settings
        self.POSTGRES_URL = os.environ.get("POSTGRES_URL","localhost:5432")
        self.POSTGRES_USER = os.environ.get("POSTGRES_USER","postgres")
        self.POSTGRES_PASSWORD = os.environ.get("POSTGRES_PASSWORD","postgres_secret")
        self.POSTGRES_DB = os.environ.get("POSTGRES_DB","coursegraph")
        self.DATABASE_URL = os.environ.get(
            "DATABASE_URL",
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_URL}/{self.POSTGRES_DB}"
        )
        # Token cache settings
        self.REDIS_HOST = os.environ.get("REDIS_HOST","localhost")
        self.REDIS_PORT = int(os.environ.get("REDIS_PORT","6379"))
        self.REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD","") or None
        self.TOKEN_EXPIRES_HOUR = int(os.environ.get("TOKEN_EXPIRES_HOUR","72"))
        # Domain settings
        self.ID_ALLOCATION_ATTEMPTS = int(os.environ.get("ID_ALLOCATION_ATTEMPTS","5"))
        self.ANSWER_RESUBMISSION = os.environ.get("ANSWER_RESUBMISSION","append").lower()
        self.BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS","12"))

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()
