"""
Command value — a not-yet-executed program invocation.

A command is given in ``program-keywords-flags`` form, e.g.
``[brew install]-[curl fish]-[--dry-run]``. It renders to a display
string for the console and to a spawn specification for the process
session. Values are immutable: builder methods return new commands.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from pmexec.core.engine import privilege
from pmexec.core.errors import InvalidCommand


@dataclass(frozen=True)
class SpawnSpec:
    """The program to launch and its argument list."""

    program: str
    args: list[str] = field(default_factory=list)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]


class Cmd(BaseModel):
    """A command to be executed.

    ``elevate`` records the caller's intent only. Whether the elevation
    helper is actually used depends on the current privilege level, see
    ``needs_elevation``.
    """

    model_config = ConfigDict(frozen=True)

    elevate: bool = False
    program_tokens: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    option_flags: tuple[str, ...] = ()

    # ── Construction ────────────────────────────────────────────

    @classmethod
    def new(cls, *program_tokens: str) -> Cmd:
        """``Cmd.new("brew", "install")``"""
        return cls(program_tokens=program_tokens)

    @classmethod
    def new_sudo(cls, *program_tokens: str) -> Cmd:
        """Like ``new``, but requesting elevation."""
        return cls(elevate=True, program_tokens=program_tokens)

    def with_keywords(self, *keywords: str) -> Cmd:
        return self.model_copy(update={"keywords": tuple(keywords)})

    def with_flags(self, *flags: str) -> Cmd:
        return self.model_copy(update={"option_flags": tuple(flags)})

    def add_flags(self, *flags: str) -> Cmd:
        """Append flags to the existing ones."""
        return self.model_copy(update={"option_flags": self.option_flags + tuple(flags)})

    def with_elevation(self, elevate: bool) -> Cmd:
        return self.model_copy(update={"elevate": elevate})

    # ── Rendering ───────────────────────────────────────────────

    @property
    def needs_elevation(self) -> bool:
        """Elevation requested and this process is not privileged."""
        return privilege.needs_elevation(self.elevate, privilege.is_privileged())

    def build_display(self, helper: str = privilege.ELEVATION_HELPER) -> str:
        """Human-readable command line: program, keywords, then flags."""
        parts = [*self.program_tokens, *self.keywords, *self.option_flags]
        if self.needs_elevation:
            parts = privilege.elevation_prefix(helper) + parts
        return " ".join(parts)

    def build_spawn_spec(self, helper: str = privilege.ELEVATION_HELPER) -> SpawnSpec:
        """Program and arguments to launch.

        Flags go before keywords: some package managers (zypper) accept
        ``install -y curl`` but reject ``install curl -y``.
        """
        if not self.program_tokens:
            raise InvalidCommand("Failed to build command: program is empty")

        if self.needs_elevation:
            return SpawnSpec(
                program=helper,
                args=[
                    privilege.ELEVATION_FLAG,
                    *self.program_tokens,
                    *self.option_flags,
                    *self.keywords,
                ],
            )

        program, *subcommand = self.program_tokens
        return SpawnSpec(
            program=program,
            args=[*subcommand, *self.option_flags, *self.keywords],
        )

    def __str__(self) -> str:
        return self.build_display()
