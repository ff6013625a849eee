"""
Codec configuration.

Settings that affect how text and paths cross the binary boundary. One
process-wide instance is used by the primitive layer; it can be swapped with
set_config() or loaded from a JSON file.
"""

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Union


@dataclass
class CodecConfig:
    """Text/path settings used by the primitive codec."""
    # Original assets are EUC-KR; decoding is lossy on purpose
    text_encoding: str = "utf-8"
    text_errors: str = "replace"

    # Directory separator used inside VFS indices
    archive_separator: str = "\\"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'CodecConfig':
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


_config = CodecConfig()


def get_config() -> CodecConfig:
    """Get the active configuration."""
    return _config


def set_config(config: CodecConfig):
    """Replace the active configuration."""
    global _config
    _config = config


def reset_config():
    """Restore default settings."""
    set_config(CodecConfig())


def load_config(path: Union[str, Path]) -> CodecConfig:
    """Load a configuration from JSON. Missing keys keep their defaults."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return CodecConfig.from_dict(data)


def save_config(config: CodecConfig, path: Union[str, Path]):
    """Write a configuration to JSON."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
