"""Build quoted command lines for launching AI coding-assistant CLIs."""

from .args_builder import build_args
from .options import CODEX, GEMINI, Mode, Model, GeminiModel, ReasoningEffort, ShellDialect, WinShell
from .settings import LauncherSettings, settings_from_config

__all__ = [
    "CODEX",
    "GEMINI",
    "GeminiModel",
    "LauncherSettings",
    "Mode",
    "Model",
    "ReasoningEffort",
    "ShellDialect",
    "WinShell",
    "build_args",
    "settings_from_config",
]
