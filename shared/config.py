"""
elfdeps Configuration Management
=================================

Centralized configuration for the elfdeps dependency lister using Python
dataclasses and TOML-based persistence.

Configuration is kept separate from code: every tunable lives in a
dataclass with a sensible default, and an optional ``config.toml`` in the
project root overrides any subset of keys.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Tool-Specific Configs ==========================


@dataclass(frozen=False, slots=True)
class ResolverConfig:
    """Configuration for the dependency resolution pipeline.

    Attributes:
        max_file_size: Largest file (in bytes) the engine will read.
        translate_addresses: Map ``DT_STRTAB`` through the ``PT_LOAD``
            segment containing it instead of using it as a file offset.
        include_details: Also resolve and show SONAME, RPATH, RUNPATH and
            the program interpreter.  JSON output always includes them.
        output_format: Default presentation (``"table"``, ``"plain"``,
            ``"json"``).
    """

    max_file_size: int = 268_435_456  # 256 MiB
    translate_addresses: bool = False
    include_details: bool = False
    output_format: str = "table"


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity and log file handling."""

    log_level: str = "WARNING"
    log_file: str | None = None
    log_json: bool = False
    debug: bool = False


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class DepsConfig:
    """Master configuration aggregating global and resolver settings.

    Usage:
        >>> config = DepsConfig.load()                  # from default path
        >>> config = DepsConfig.load("custom.toml")     # from custom path
        >>> config.resolver.translate_addresses
        False
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> DepsConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`DepsConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            resolver=cls._build_section(ResolverConfig, raw.get("resolver", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that newer config
        files keep working with older code.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> DepsConfig:
    """Module-level convenience wrapper around :meth:`DepsConfig.load`.

    Caches the result so that repeated calls share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = DepsConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
