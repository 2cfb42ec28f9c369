import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.environ.get(name, default)))


def db_config_from_env(default_password: str = "") -> dict:
    """mysql-connector settings read from DB_* variables."""

    return {
        "host": os.environ.get("DB_HOST", "localhost"),
        "port": int(os.environ.get("DB_PORT", "3306")),
        "user": os.environ.get("DB_USER", "root"),
        "password": os.environ.get("DB_PASSWORD", default_password),
        "database": os.environ.get("DB_NAME", "school_attendance"),
    }


JWT_ACCESS_TOKEN_HOURS = int(os.environ.get("JWT_ACCESS_TOKEN_HOURS", "24"))
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
