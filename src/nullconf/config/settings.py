"""Unified settings: CLI flags, env vars, and code defaults in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``NULLCONF_*`` prefix
  3. Code defaults

Uses Pydantic Settings v2.
"""

from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings


class NullconfSettings(BaseSettings):
    """Settings for the nullconf CLI and services.

    Attributes:
        weakly_typed_input: Lenient scalar conversion during decode, and
            single-string promotion for string-list fields.
        error_unused: Report document keys that match no declared field.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "NULLCONF_",
    }

    # --- Output flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- Decoder options ---
    weakly_typed_input: bool = False
    error_unused: bool = False

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> NullconfSettings:
        """Construct settings from a CLI invocation.

        Flags left at their Click default (False/None) are dropped so
        environment variables can still switch them on.
        """
        overrides = {key: value for key, value in cli_flags.items() if value}
        return cls(**overrides)
