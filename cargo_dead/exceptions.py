"""Custom exceptions for cargo-dead."""

from __future__ import annotations

from pathlib import Path


class CargoDeadError(Exception):
    """Base exception for all cargo-dead errors."""


class MetadataError(CargoDeadError):
    """Raised when workspace metadata cannot be obtained from cargo."""

    def __init__(self, message: str, command: list[str] | None = None):
        self.command = command
        super().__init__(message)


class ManifestError(CargoDeadError):
    """Raised when a Cargo.toml cannot be read, parsed or written."""

    def __init__(self, manifest_path: Path, message: str):
        self.manifest_path = manifest_path
        super().__init__(f"{manifest_path}: {message}")
