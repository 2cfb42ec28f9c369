from .config import CORS_ORIGINS, db_config_from_env

SECRET_KEY = "test-secret"
JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
JWT_ACCESS_TOKEN_HOURS = 1

DB_CONFIG = db_config_from_env()

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
