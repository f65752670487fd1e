"""UI theme definitions and selection helpers.

Themes are UI-only ANSI palettes. Syntax highlighting style for the raw view
and markdown previews remains a separate Pygments setting.
"""

from __future__ import annotations

from dataclasses import dataclass

DEPTH_PALETTE_SIZE = 8


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    marker: str
    key: str
    index: str
    string: str
    number: str
    boolean: str
    null: str
    container: str
    match_on: str
    match_off: str
    header_active: str
    header_inactive: str
    status: str
    prompt: str
    hint: str
    column_trail: str
    help_heading: str
    help_key: str
    help_dim: str
    depth_palette: tuple[str, ...]

    def depth_color(self, depth: int) -> str:
        """Return the cosmetic indent-guide color for ``depth``."""
        if not self.depth_palette:
            return ""
        return self.depth_palette[depth % len(self.depth_palette)]

    def kind_color(self, kind: str) -> str:
        return {
            "string": self.string,
            "number": self.number,
            "boolean": self.boolean,
            "null": self.null,
            "object": self.container,
            "array": self.container,
        }.get(kind, "")


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    marker="\033[38;5;44m",
    key="\033[1;38;5;111m",
    index="\033[38;5;146m",
    string="\033[38;5;150m",
    number="\033[38;5;215m",
    boolean="\033[38;5;176m",
    null="\033[2;38;5;250m",
    container="\033[2;38;5;250m",
    match_on="\033[7;1m",
    match_off="\033[27;22m",
    header_active="\033[1;7;38;5;81m",
    header_inactive="\033[2;38;5;250m",
    status="\033[38;5;252m",
    prompt="\033[1;38;5;81m",
    hint="\033[2;38;5;250m",
    column_trail="\033[38;5;81m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
    depth_palette=(
        "\033[38;5;39m",
        "\033[38;5;42m",
        "\033[38;5;214m",
        "\033[38;5;170m",
        "\033[38;5;45m",
        "\033[38;5;203m",
        "\033[38;5;149m",
        "\033[38;5;141m",
    ),
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    marker="\033[38;5;39m",
    key="\033[1;38;5;45m",
    index="\033[38;5;110m",
    string="\033[38;5;153m",
    number="\033[38;5;117m",
    boolean="\033[38;5;84m",
    null="\033[2;38;5;110m",
    container="\033[2;38;5;110m",
    match_on="\033[7;1m",
    match_off="\033[27;22m",
    header_active="\033[1;7;38;5;45m",
    header_inactive="\033[2;38;5;110m",
    status="\033[38;5;153m",
    prompt="\033[1;38;5;45m",
    hint="\033[2;38;5;110m",
    column_trail="\033[38;5;45m",
    help_heading="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
    depth_palette=(
        "\033[38;5;24m",
        "\033[38;5;31m",
        "\033[38;5;38m",
        "\033[38;5;45m",
        "\033[38;5;74m",
        "\033[38;5;81m",
        "\033[38;5;110m",
        "\033[38;5;117m",
    ),
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="",
    reset="",
    marker="",
    key="",
    index="",
    string="",
    number="",
    boolean="",
    null="",
    container="",
    match_on="",
    match_off="",
    header_active="",
    header_inactive="",
    status="",
    prompt="",
    hint="",
    column_trail="",
    help_heading="",
    help_key="",
    help_dim="",
    depth_palette=(),
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


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]
