import os


def _env(name: str, default: str) -> str:
    return os.getenv(f"SCHOOL_{name}", default)


class Settings:
    def __init__(self):
        self.app_name = "School Bulletin"
        self.api_version = "1.0.0"
        self.environment = _env("ENVIRONMENT", "development")
        self.secret_key = _env("SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(_env("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = _env("DATABASE_URL", "sqlite:///./school.db")

        # Profile photo storage
        self.media_root = _env("MEDIA_ROOT", "./media")
        self.media_url = _env("MEDIA_URL", "/media")
        self.max_photo_bytes = int(_env("MAX_PHOTO_BYTES", str(10 * 1024 * 1024)))

        # Bulletin header block
        self.institution_name = _env("INSTITUTION_NAME", "URUHONGORE ACADEMY")
        self.institution_contact = _env("INSTITUTION_CONTACT", "TEL: 0784696074/0786064017")
        self.location_left = ("DISTRICT: KICUKIRO", "VILLAGE: NYANZA")
        self.location_right = ("SECTEUR: GATENGA", "VILLAGE: JURU")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
