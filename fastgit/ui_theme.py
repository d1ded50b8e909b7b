"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the tree, status icons, diff lines, panels and
dialogs. Diff content syntax coloring uses a separate Pygments style.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    bold: str
    panel_active: str
    panel_inactive: str
    tree_marker: str
    tree_dir: str
    tree_file_default: str
    status_staged: str
    status_new: str
    status_modified: str
    status_deleted: str
    status_renamed: str
    status_other: str
    diff_add: str
    diff_delete: str
    diff_header: str
    diff_context: str
    branch_tab_active: str
    branch_tab_inactive: str
    remote_name: str
    footer: str
    dialog_warning: str
    dialog_error: str
    dialog_info: str
    dialog_success: str
    help_key: str
    help_dim: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    bold="\033[1m",
    panel_active="\033[1;33m",
    panel_inactive="\033[1;37m",
    tree_marker="\033[38;5;44m",
    tree_dir="\033[1;37m",
    tree_file_default="\033[37m",
    status_staged="\033[32m",
    status_new="\033[32m",
    status_modified="\033[33m",
    status_deleted="\033[31m",
    status_renamed="\033[36m",
    status_other="\033[35m",
    diff_add="\033[32m",
    diff_delete="\033[31m",
    diff_header="\033[1;36m",
    diff_context="\033[37m",
    branch_tab_active="\033[1;30;43m",
    branch_tab_inactive="\033[2;37m",
    remote_name="\033[1;36m",
    footer="\033[7m",
    dialog_warning="\033[1;33m",
    dialog_error="\033[1;31m",
    dialog_info="\033[1;36m",
    dialog_success="\033[1;32m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    bold="\033[1m",
    panel_active="\033[1;38;5;45m",
    panel_inactive="\033[2;38;5;31m",
    tree_marker="\033[38;5;39m",
    tree_dir="\033[1;38;5;45m",
    tree_file_default="\033[38;5;252m",
    status_staged="\033[38;5;79m",
    status_new="\033[38;5;79m",
    status_modified="\033[38;5;221m",
    status_deleted="\033[38;5;203m",
    status_renamed="\033[38;5;117m",
    status_other="\033[38;5;177m",
    diff_add="\033[38;5;79m",
    diff_delete="\033[38;5;203m",
    diff_header="\033[1;38;5;45m",
    diff_context="\033[38;5;252m",
    branch_tab_active="\033[1;38;5;16;48;5;45m",
    branch_tab_inactive="\033[2;38;5;110m",
    remote_name="\033[1;38;5;117m",
    footer="\033[7;38;5;45m",
    dialog_warning="\033[1;38;5;221m",
    dialog_error="\033[1;38;5;203m",
    dialog_info="\033[1;38;5;117m",
    dialog_success="\033[1;38;5;79m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    bold="",
    panel_active="",
    panel_inactive="",
    tree_marker="",
    tree_dir="",
    tree_file_default="",
    status_staged="",
    status_new="",
    status_modified="",
    status_deleted="",
    status_renamed="",
    status_other="",
    diff_add="",
    diff_delete="",
    diff_header="",
    diff_context="",
    branch_tab_active="",
    branch_tab_inactive="",
    remote_name="",
    footer="",
    dialog_warning="",
    dialog_error="",
    dialog_info="",
    dialog_success="",
    help_key="",
    help_dim="",
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
    return _THEMES.get(normalize_theme_name(name), DEFAULT_THEME)


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
