"""Option enums for launcher settings and the supported CLI targets.

Each enum value is the string accepted in ``config.yaml``.  ``cli_name`` is
what ends up on the command line and ``display_name`` is what a settings
listing shows to the user.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class _Option(enum.Enum):
    @classmethod
    def parse(cls, raw: object, key: str):
        """Look up a member by value or by name, case-insensitively.

        Raises :class:`ValueError` naming *key* when nothing matches.
        """
        if isinstance(raw, cls):
            return raw
        text = str(raw).strip().casefold()
        for member in cls:
            if text in (str(member.value).casefold(), member.name.casefold()):
                return member
        choices = ", ".join(str(m.value) for m in cls)
        raise ValueError(f"Invalid value {raw!r} for '{key}' (expected one of: {choices})")


class Mode(_Option):
    """Launch mode."""

    DEFAULT = "default"
    FULL_AUTO = "full_auto"

    @property
    def display_name(self) -> str:
        if self is Mode.FULL_AUTO:
            return "Full Auto (--full-auto)"
        return "Default (No arguments)"


class _ModelOption(_Option):
    """Shared behaviour for per-target model tables.

    ``DEFAULT`` means "do not pass --model"; ``CUSTOM`` means "use the
    free-text ``custom_model`` setting".
    """

    @property
    def cli_name(self) -> str:
        if self.name in ("DEFAULT", "CUSTOM"):
            return ""
        return str(self.value)

    @property
    def is_default(self) -> bool:
        return self.name == "DEFAULT"

    @property
    def is_custom(self) -> bool:
        return self.name == "CUSTOM"


class Model(_ModelOption):
    """Codex ``--model`` choices.

    The gpt-5 entries stay alongside gpt-5.1 for environments where the newer
    models are not available yet.
    """

    DEFAULT = "default"
    GPT_5 = "gpt-5"
    GPT_5_CODEX = "gpt-5-codex"
    CODEX_MINI_LATEST = "codex-mini-latest"
    GPT_5_1 = "gpt-5.1"
    GPT_5_1_CODEX = "gpt-5.1-codex"
    GPT_5_1_CODEX_MINI = "gpt-5.1-codex-mini"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        if self is Model.DEFAULT:
            return "Default"
        if self is Model.CUSTOM:
            return "Custom..."
        return self.cli_name


class GeminiModel(_ModelOption):
    """Gemini ``--model`` choices."""

    DEFAULT = "default"
    GEMINI_1_5_PRO = "gemini-1.5-pro"
    GEMINI_1_5_FLASH = "gemini-1.5-flash"
    GEMINI_PRO = "gemini-pro"
    GEMINI_ULTRA = "gemini-ultra"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return _GEMINI_DISPLAY[self]


_GEMINI_DISPLAY = {
    GeminiModel.DEFAULT: "Default",
    GeminiModel.GEMINI_1_5_PRO: "Gemini 1.5 Pro",
    GeminiModel.GEMINI_1_5_FLASH: "Gemini 1.5 Flash",
    GeminiModel.GEMINI_PRO: "Gemini Pro",
    GeminiModel.GEMINI_ULTRA: "Gemini Ultra",
    GeminiModel.CUSTOM: "Custom...",
}


class ReasoningEffort(_Option):
    """Value of the ``model_reasoning_effort`` config override."""

    DEFAULT = "default"
    MINIMAL = "minimal"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTRA_HIGH = "xhigh"

    @property
    def cli_name(self) -> str:
        return "" if self is ReasoningEffort.DEFAULT else str(self.value)

    @property
    def display_name(self) -> str:
        if self is ReasoningEffort.EXTRA_HIGH:
            return "Extra High"
        return self.name.capitalize()


class WinShell(_Option):
    """Preferred shell on Windows hosts."""

    POWERSHELL_LT_73 = "powershell_lt_73"
    POWERSHELL_73_PLUS = "powershell_73_plus"
    WSL = "wsl"

    @property
    def display_name(self) -> str:
        return _WIN_SHELL_DISPLAY[self]


_WIN_SHELL_DISPLAY = {
    WinShell.POWERSHELL_LT_73: "PowerShell (< 7.3)",
    WinShell.POWERSHELL_73_PLUS: "PowerShell (>= 7.3)",
    WinShell.WSL: "WSL",
}


class ShellDialect(_Option):
    """Quoting regime of the shell that receives the command line."""

    POSIX = "posix"
    POWERSHELL_LT_73 = "powershell_lt_73"
    POWERSHELL_GE_73 = "powershell_ge_73"
    WSL = "wsl"

    @property
    def is_powershell(self) -> bool:
        return self in (ShellDialect.POWERSHELL_LT_73, ShellDialect.POWERSHELL_GE_73)

    @property
    def display_name(self) -> str:
        return {
            ShellDialect.POSIX: "POSIX shell",
            ShellDialect.POWERSHELL_LT_73: "PowerShell (< 7.3)",
            ShellDialect.POWERSHELL_GE_73: "PowerShell (>= 7.3)",
            ShellDialect.WSL: "WSL",
        }[self]

    @classmethod
    def for_host(cls, win_shell: WinShell, host_windows: bool) -> ShellDialect:
        """Combine the Windows shell preference with host OS detection."""
        if not host_windows:
            return cls.POSIX
        return {
            WinShell.POWERSHELL_LT_73: cls.POWERSHELL_LT_73,
            WinShell.POWERSHELL_73_PLUS: cls.POWERSHELL_GE_73,
            WinShell.WSL: cls.WSL,
        }[win_shell]


# ── CLI targets ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class CliTarget:
    """Fixed facts about one external assistant CLI."""

    name: str
    binary: str
    display_name: str
    model_enum: type[_ModelOption]
    search_flags: tuple[str, ...]
    ide_port_env: str | None = None


CODEX = CliTarget(
    name="codex",
    binary="codex",
    display_name="Codex",
    model_enum=Model,
    search_flags=("--search",),
)

GEMINI = CliTarget(
    name="gemini",
    binary="gemini",
    display_name="Gemini",
    model_enum=GeminiModel,
    search_flags=("--enable", "web_search_request"),
    ide_port_env="GEMINI_CLI_IDE_SERVER_PORT",
)

TARGETS: dict[str, CliTarget] = {t.name: t for t in (CODEX, GEMINI)}


def parse_target(raw: object) -> CliTarget:
    if isinstance(raw, CliTarget):
        return raw
    key = str(raw).strip().casefold()
    if key not in TARGETS:
        raise ValueError(
            f"Invalid value {raw!r} for 'target' (expected one of: {', '.join(TARGETS)})"
        )
    return TARGETS[key]
