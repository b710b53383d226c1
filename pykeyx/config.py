"""
Library configuration with environment overrides.

    PYKEYX_DEFAULT_DEK_TEMPLATE = AES128_GCM | AES256_GCM | CHACHA20_POLY1305
    PYKEYX_ALLOW_OVERWRITE      = true | false
    PYKEYX_NEW_KEY_ALLOWED      = true | false
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pykeyx.aead.templates import TEMPLATES

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pykeyx.models.keys import KeyTemplate

__all__ = ["PyKeyXConfig"]

logger = logging.getLogger(__name__)

_ENV_VARS: Final[dict[str, str]] = {
    "default_dek_template": "PYKEYX_DEFAULT_DEK_TEMPLATE",
    "allow_overwrite": "PYKEYX_ALLOW_OVERWRITE",
    "new_key_allowed": "PYKEYX_NEW_KEY_ALLOWED",
}


class PyKeyXConfig(BaseModel):
    """Validated library configuration.

    Attributes:
        default_dek_template: Name of the built-in AEAD template used for
            envelope DEKs when none is given
        allow_overwrite: Overwrite flag used when registering built-in managers
        new_key_allowed: Whether built-in managers may create new keys
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    default_dek_template: str = Field(default="AES256_GCM")
    allow_overwrite: bool = Field(default=False)
    new_key_allowed: bool = Field(default=True)

    @field_validator("default_dek_template")
    @classmethod
    def validate_dek_template(cls, name: str) -> str:
        """Only built-in AEAD templates can serve as the default DEK."""
        normalized = name.strip().upper()
        if normalized not in TEMPLATES:
            msg = f"Unknown DEK template {name!r} (available: {sorted(TEMPLATES)})"
            raise ValueError(msg)
        return normalized

    @property
    def dek_template(self) -> KeyTemplate:
        return TEMPLATES[self.default_dek_template]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PyKeyXConfig:
        """Build a config from ``PYKEYX_*`` environment variables.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        values = {field: env[var] for field, var in _ENV_VARS.items() if var in env}
        logger.debug("Loaded configuration overrides: %s", sorted(values))
        return cls.model_validate(values)
