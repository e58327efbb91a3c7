"""apiwiki - versioned API reference pages from .NET metadata manifests."""

from apiwiki.config import Config, ConfigError, load_config, load_settings
from apiwiki.diagnostics import Diagnostic, DiagnosticCode
from apiwiki.generation.orchestrator import (
    GenerationOrchestrator,
    GenerationResult,
    run_generation,
)
from apiwiki.generation.writer import OutputWriteError
from apiwiki.manifest import ManifestError
from apiwiki.versions import VersionError

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigError",
    "Diagnostic",
    "DiagnosticCode",
    "GenerationOrchestrator",
    "GenerationResult",
    "ManifestError",
    "OutputWriteError",
    "VersionError",
    "load_config",
    "load_settings",
    "run_generation",
]
