"""
Configuration.

ParserConfig holds the per-parser options; Settings holds the
environment-driven options of the package (logging).
"""

from functools import lru_cache
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserConfig(BaseModel):
    """
    Options for a Parser instance.

    Attributes:
        implicit_multiply: Adjacent operands with no operator between them
            are multiplied ("3x", "(1)(2)")
        left_associative: Operators of equal precedence group to the left
        valid_variables: Single-letter variable names that are allowed;
            None allows every letter
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    implicit_multiply: bool = Field(default=True, alias="implicitMultiply")
    left_associative: bool = Field(default=True, alias="leftAssociative")
    valid_variables: Optional[FrozenSet[str]] = Field(
        default=None, alias="validVariables"
    )

    @field_validator("valid_variables")
    @classmethod
    def _single_letters(cls, value):
        if value is None:
            return value
        for name in value:
            if len(name) != 1 or not (name.isascii() and name.isalpha()):
                raise ValueError(
                    f"Variables must be single ASCII letters, got {name!r}"
                )
        return value


class Settings(BaseSettings):
    """Package settings, read from MATHAST_* environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="MATHAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "text"  # json or text
    LOG_FILE: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
