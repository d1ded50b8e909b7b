"""Frame composition for the four-panel view.

``build_frame`` returns exactly ``height`` lines of ``width`` columns and
never touches state; overlays (dialogs, commit editor, help) are positioned
separately with cursor moves so they can float over the panels.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from .ansi import clip_ansi_line, display_width, fit_ansi_line
from .file_tree import TreeRow
from .git_status import status_color, status_icon
from .state import (
    WINDOW_BRANCHES,
    WINDOW_DIFF,
    WINDOW_LOG,
    WINDOW_TITLES,
    WINDOW_TREE,
    AppState,
    BranchTab,
    Dialog,
    DialogType,
)
from .ui_theme import DEFAULT_THEME, UITheme

SELECTED_MARKER = "▶ "
EMPTY_TREE_TEXT = "Working tree is clean"
NOT_A_REPO_TEXT = "Not a git repository"

HELP_LINES: tuple[tuple[str, str], ...] = (
    ("Tab / Shift+Tab", "cycle panels"),
    ("j/k  Up/Down", "move or scroll"),
    ("h/l  Left/Right", "collapse / expand folder"),
    ("Enter", "open diff, toggle folder, checkout branch"),
    ("Esc", "back to tree"),
    ("n / N", "next / previous file"),
    ("+ / -", "expand / collapse all"),
    ("Space", "stage or unstage file"),
    ("c", "commit staged changes"),
    ("p", "push"),
    ("b", "local / remote branches"),
    ("s", "rescan working copy"),
    ("K", "keep folders expanded on rescan"),
    ("?", "help"),
    ("q", "quit"),
)


def tree_visible_rows(height: int) -> int:
    """Rows available inside the tree box for a terminal ``height``."""
    top, _bottom = _split_heights(height)
    return max(1, top - 2)


def _split_heights(height: int) -> tuple[int, int]:
    body = max(0, height - 1)
    top = body // 2
    return top, body - top


def _split_widths(width: int) -> tuple[int, int, int]:
    tree_w = width * 45 // 100
    log_w = width * 35 // 100
    return tree_w, log_w, width - tree_w - log_w


def draw_box(title: str, content: list[str], width: int, height: int, active: bool, theme: UITheme) -> list[str]:
    """Draw ``content`` inside a rounded border with ``title`` on the top edge."""
    if width < 2 or height < 2:
        return [" " * max(0, width)] * max(0, height)

    color = theme.panel_active if active else theme.panel_inactive
    inner = width - 2
    label = clip_ansi_line(f" {title} ", max(0, inner - 1)) if inner > 2 else ""
    fill = "─" * max(0, inner - 1 - display_width(label))
    top = f"{color}╭─{label}{fill}╮{theme.reset}" if inner >= 1 else f"{color}╭╮{theme.reset}"
    bottom = f"{color}╰{'─' * inner}╯{theme.reset}"

    lines = [top]
    for idx in range(height - 2):
        body = content[idx] if idx < len(content) else ""
        lines.append(f"{color}│{theme.reset}{fit_ansi_line(body, inner, theme.reset)}{color}│{theme.reset}")
    lines.append(bottom)
    return lines


def format_tree_row(
    row: TreeRow,
    statuses: dict[PurePosixPath, int],
    selected: bool,
    theme: UITheme = DEFAULT_THEME,
) -> str:
    indent = "  " * row.depth
    prefix = SELECTED_MARKER if selected else "  "
    if row.is_dir:
        marker = "▾ " if row.expanded else "▸ "
        if selected:
            return f"{theme.reverse}{prefix}{indent}{marker}{row.name}/{theme.reset}"
        return f"{prefix}{indent}{theme.tree_marker}{marker}{theme.reset}{theme.tree_dir}{row.name}/{theme.reset}"

    flags = statuses.get(row.path)
    icon = status_icon(flags).ljust(2)
    if selected:
        return f"{theme.reverse}{prefix}{indent}{icon} {row.name}{theme.reset}"
    color = status_color(flags, theme)
    return f"{prefix}{indent}{color}{icon}{theme.reset} {color}{row.name}{theme.reset}"


def _tree_content(state: AppState, rows: int, theme: UITheme) -> list[str]:
    if not state.is_git_repo:
        return [NOT_A_REPO_TEXT]
    tree = state.tree
    if not tree.rows:
        return [EMPTY_TREE_TEXT]
    start = state.tree_start
    return [
        format_tree_row(row, state.statuses, start + offset == tree.selected, theme)
        for offset, row in enumerate(tree.rows[start : start + rows])
    ]


def _log_content(state: AppState, rows: int) -> list[str]:
    start = state.commit_log_scroll
    return state.commit_log[start : start + rows]


def _branch_content(state: AppState, rows: int, theme: UITheme) -> list[str]:
    local_style = theme.branch_tab_active if state.branch_tab is BranchTab.LOCAL else theme.branch_tab_inactive
    remote_style = theme.branch_tab_active if state.branch_tab is BranchTab.REMOTE else theme.branch_tab_inactive
    out = [f"{local_style} Local {theme.reset} {remote_style} Remote {theme.reset}"]

    if state.branch_tab is BranchTab.LOCAL:
        items = [
            ("* " if branch == state.current_branch else "  ") + branch
            for branch in state.branches
        ]
        selected = state.branch_selected
    else:
        items = [f"{theme.remote_name}{name}{theme.reset} {url}" for name, url in state.remotes]
        selected = state.remote_selected

    visible = max(0, rows - 1)
    start = 0 if selected is None or selected < visible else selected - visible + 1
    for idx, item in enumerate(items[start : start + visible], start=start):
        if idx == selected:
            out.append(f"{theme.reverse}{item}{theme.reset}")
        else:
            out.append(item)
    return out


def _diff_content(state: AppState, rows: int) -> list[str]:
    start = state.diff_scroll
    return state.diff_display[start : start + rows]


def build_status_line(state: AppState, width: int, theme: UITheme = DEFAULT_THEME) -> str:
    parts = []
    if state.current_branch:
        parts.append(state.current_branch)
    if state.is_git_repo:
        parts.append(f"{len(state.statuses)} changed")
    parts.append(WINDOW_TITLES[state.window_index])
    if state.push_in_progress:
        parts.append("pushing...")
    if state.status_message:
        parts.append(state.status_message)
    left = " " + " | ".join(parts)
    right = "? help  q quit "
    gap = width - display_width(left) - display_width(right)
    text = left + " " * gap + right if gap >= 1 else left
    return f"{theme.footer}{fit_ansi_line(text, width, theme.reset)}{theme.reset}"


def build_frame(state: AppState, width: int, height: int, theme: UITheme = DEFAULT_THEME) -> list[str]:
    """Compose the panel grid and footer into ``height`` screen lines."""
    if width <= 0 or height <= 0:
        return []
    top_h, bottom_h = _split_heights(height)
    tree_w, log_w, branch_w = _split_widths(width)
    active = state.window_index

    tree_box = draw_box(
        WINDOW_TITLES[WINDOW_TREE],
        _tree_content(state, max(0, top_h - 2), theme),
        tree_w,
        top_h,
        active == WINDOW_TREE,
        theme,
    )
    log_box = draw_box(
        WINDOW_TITLES[WINDOW_LOG],
        _log_content(state, max(0, top_h - 2)),
        log_w,
        top_h,
        active == WINDOW_LOG,
        theme,
    )
    branch_box = draw_box(
        WINDOW_TITLES[WINDOW_BRANCHES],
        _branch_content(state, max(0, top_h - 2), theme),
        branch_w,
        top_h,
        active == WINDOW_BRANCHES,
        theme,
    )
    diff_title = WINDOW_TITLES[WINDOW_DIFF]
    if state.selected_file is not None:
        diff_title = f"{diff_title}: {state.selected_file}"
    diff_box = draw_box(
        diff_title,
        _diff_content(state, max(0, bottom_h - 2)),
        width,
        bottom_h,
        active == WINDOW_DIFF,
        theme,
    )

    lines = [a + b + c for a, b, c in zip(tree_box, log_box, branch_box)]
    lines.extend(diff_box)
    lines.append(build_status_line(state, width, theme))
    return lines[:height]


def _dialog_color(dialog_type: DialogType, theme: UITheme) -> str:
    return {
        DialogType.WARNING: theme.dialog_warning,
        DialogType.ERROR: theme.dialog_error,
        DialogType.INFO: theme.dialog_info,
        DialogType.SUCCESS: theme.dialog_success,
    }[dialog_type]


def _centered(box: list[str], box_width: int, width: int, height: int) -> list[tuple[int, int, str]]:
    row = max(0, (height - len(box)) // 2)
    col = max(0, (width - box_width) // 2)
    return [(row + idx, col, line) for idx, line in enumerate(box) if row + idx < height]


def _dialog_overlay(dialog: Dialog, width: int, height: int, theme: UITheme) -> list[tuple[int, int, str]]:
    box_width = max(2, min(dialog.width, width))
    color = _dialog_color(dialog.dialog_type, theme)
    inner = box_width - 4
    content = [""] + [f" {line}".ljust(inner) for line in dialog.lines] + [""]
    title = f"{color}{dialog.title}{theme.reset}"
    box = draw_box(title, content, box_width, len(content) + 2, True, theme)
    return _centered(box, box_width, width, height)


def _field_view(text: str, cursor: int, width: int, focused: bool, theme: UITheme) -> str:
    """Clip a one-line field to ``width`` keeping the cursor visible."""
    width = max(1, width)
    start = max(0, cursor - (width - 1))
    visible = text[start : start + width]
    if not focused:
        return visible
    pos = cursor - start
    under = visible[pos] if pos < len(visible) else " "
    return f"{visible[:pos]}{theme.reverse}{under}{theme.reset}{visible[pos + 1:]}"


def _commit_overlay(state: AppState, width: int, height: int, theme: UITheme) -> list[tuple[int, int, str]]:
    draft = state.commit_draft
    box_width = max(2, min(70, width))
    inner = max(1, box_width - 4)
    summary_label = "Summary" if draft.focus_description else f"{theme.bold}Summary{theme.reset}"
    description_label = f"{theme.bold}Description{theme.reset}" if draft.focus_description else "Description"
    content = [
        f" {summary_label}",
        " " + _field_view(draft.summary, draft.summary_cursor, inner, not draft.focus_description, theme),
        "",
        f" {description_label}",
        " " + _field_view(draft.description, draft.description_cursor, inner, draft.focus_description, theme),
        "",
        f" {theme.help_dim}Tab switch  Enter commit  Esc cancel{theme.reset}",
    ]
    box = draw_box("Commit", content, box_width, len(content) + 2, True, theme)
    return _centered(box, box_width, width, height)


def _help_overlay(width: int, height: int, theme: UITheme) -> list[tuple[int, int, str]]:
    key_width = max(len(key) for key, _desc in HELP_LINES)
    content = [f" {theme.help_key}{key.ljust(key_width)}{theme.reset}  {desc}" for key, desc in HELP_LINES]
    content.append("")
    content.append(f" {theme.help_dim}press any key to close{theme.reset}")
    box_width = max(2, min(key_width + 48, width))
    box = draw_box("Help", content, box_width, len(content) + 2, True, theme)
    return _centered(box, box_width, width, height)


def build_overlays(state: AppState, width: int, height: int, theme: UITheme = DEFAULT_THEME) -> list[tuple[int, int, str]]:
    """Return ``(row, col, text)`` placements drawn over the panel grid."""
    if state.dialog is not None:
        return _dialog_overlay(state.dialog, width, height, theme)
    if state.show_commit_dialog:
        return _commit_overlay(state, width, height, theme)
    if state.push_in_progress:
        pushing = Dialog(DialogType.INFO, "Pushing", ("Pushing to remote...",), width=40)
        return _dialog_overlay(pushing, width, height, theme)
    if state.show_help:
        return _help_overlay(width, height, theme)
    return []


def compose_screen(state: AppState, width: int, height: int, theme: UITheme = DEFAULT_THEME) -> str:
    """Build the full ANSI payload for one frame."""
    out = ["\033[H"]
    out.append("\r\n".join(build_frame(state, width, height, theme)))
    for row, col, text in build_overlays(state, width, height, theme):
        out.append(f"\033[{row + 1};{col + 1}H{clip_ansi_line(text, width - col)}{theme.reset}")
    return "".join(out)
