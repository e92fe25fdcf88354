from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Role Permission Editor"
    server_host: str = "0.0.0.0"
    server_port: int = 8080
    log_level: str = "INFO"
    # Guard assigned to freshly created drafts
    default_guard_name: str = "web"
    # Guards the role store accepts; the editor itself does not enforce these
    guard_names: List[str] = ["web", "api"]
    # Group used for permissions that arrive without a group_name
    fallback_group_name: str = "other"
    # Optional JSON file with [{id, name, group_name}, ...] for the in-memory role store
    permission_catalog_path: str = ""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


# module-level settings instance for convenience across the app
settings = Settings()
