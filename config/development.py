import os

from .config import CORS_ORIGINS, JWT_ACCESS_TOKEN_HOURS, db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret")

DB_CONFIG = db_config_from_env()

DEBUG = True

# Applies schema.sql on startup (CREATE TABLE IF NOT EXISTS, safe to repeat)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Creates the default admin and sample school data when missing
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "1")
