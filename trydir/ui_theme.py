"""ANSI palettes for the selector screen.

Themes only affect chrome colors; the plain theme is used whenever color
output is disabled.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the renderer."""

    name: str
    reset: str
    reverse: str
    title: str
    dim: str
    match: str
    marker: str
    warning: str
    prompt_title: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    title="\033[1;33m",
    dim="\033[2;37m",
    match="\033[1;33m",
    marker="\033[1;33m",
    warning="\033[1;33m",
    prompt_title="\033[1;36m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    title="\033[1;38;5;45m",
    dim="\033[2;38;5;110m",
    match="\033[1;38;5;81m",
    marker="\033[1;38;5;39m",
    warning="\033[1;38;5;215m",
    prompt_title="\033[1;38;5;45m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    title="",
    dim="",
    match="",
    marker="",
    warning="",
    prompt_title="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def colors_enabled(is_tty: bool, environ: Mapping[str, str]) -> bool:
    """Apply ``NO_COLOR`` / ``CLICOLOR_FORCE`` / ``CLICOLOR`` conventions."""
    if not is_tty:
        return False
    if "NO_COLOR" in environ:
        return False
    force = environ.get("CLICOLOR_FORCE")
    if force is not None and force != "0":
        return True
    return environ.get("CLICOLOR") != "0"


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES.get(normalize_theme_name(name), DEFAULT_THEME)


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "colors_enabled",
    "normalize_theme_name",
    "resolve_theme",
]
