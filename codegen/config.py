# codegen/config.py
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    recipes_dir: str = Field(default="recipes")
    recipe_file: str = Field(default="recipe.yaml")
    package_manifest: str = Field(default="package.json")

    # Upper bound on re-expansion passes for a single template
    max_expansions: int = Field(default=100, ge=1)

    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="RECIPEGEN_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
