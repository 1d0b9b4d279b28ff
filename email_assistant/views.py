"""
Rich renderables for the panel.

Every function here is a pure function of the data it is given: no function
reads controller state on its own or keeps state between calls.
"""

from typing import List, Optional, Sequence

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .controller import PanelState
from .models import (
    AppSettings,
    Email,
    EmailAnalysisResult,
    FollowUpAnalysis,
    SecurityAnalysis,
    SecurityStatus,
    Theme,
    Tone,
)
from .theme import Palette, build_palette

LOADING_TEXT = "Loading…"

_SECURITY_STYLES = {
    SecurityStatus.SAFE: ("green", "✔"),
    SecurityStatus.SPAM: ("yellow", "!"),
    SecurityStatus.PHISHING: ("red", "✖"),
    SecurityStatus.VIRUS: ("bold red", "✖"),
}


def _panel(body: RenderableType, title: str, palette: Palette, border: Optional[str] = None) -> Panel:
    return Panel(
        body,
        title=Text(title, style=palette.accent_bold),
        title_align="left",
        border_style=border or palette.accent,
        style=palette.panel_style,
    )


def _loading(palette: Palette, title: str) -> Panel:
    return _panel(Text(LOADING_TEXT, style=palette.muted), title, palette, border=palette.muted)


def _bullets(items: Sequence[str], palette: Palette) -> Text:
    text = Text()
    for i, item in enumerate(items):
        if i:
            text.append("\n")
        text.append("• ", style=palette.accent)
        text.append(item)
    return text


# ---------------------------------------------------------------------------
# Header and banners
# ---------------------------------------------------------------------------


def render_header(palette: Palette, is_dark_mode: bool) -> Text:
    mode = "dark" if is_dark_mode else "light"
    header = Text()
    header.append("Email Assistant", style=palette.accent_bold)
    header.append(f"   [{mode} mode]  ", style=palette.muted)
    header.append("theme · settings · help", style=palette.muted)
    return header


def render_error(error: Optional[str], palette: Palette) -> Optional[Panel]:
    if not error:
        return None
    return Panel(
        Text(error),
        title=Text("Error", style=palette.error),
        title_align="left",
        border_style="red",
    )


def render_security(
    analysis: Optional[SecurityAnalysis], is_loading: bool, palette: Palette
) -> Optional[Panel]:
    if is_loading:
        return _loading(palette, "Security Scan")
    if analysis is None:
        return None

    style, icon = _SECURITY_STYLES[analysis.status]
    body = Text()
    body.append(f"{icon} {analysis.status.value}", style=f"bold {style}")
    if analysis.details:
        body.append("\n")
        body.append(analysis.details)
    return _panel(body, "Security Scan", palette, border=style)


# ---------------------------------------------------------------------------
# Email
# ---------------------------------------------------------------------------


def render_email(email: Optional[Email], expanded: bool, palette: Palette) -> Optional[Panel]:
    if email is None:
        return None

    marker = "▾" if expanded else "▸"
    title = f"{marker} Original Email"
    if not expanded:
        summary = Text(f"{email.subject}  ", style="bold")
        summary.append("(type 'email' to expand)", style=palette.muted)
        return _panel(summary, title, palette)

    body = Text()
    body.append("From: ", style="bold")
    body.append(f"{email.sender.name} <{email.sender.email}>\n")
    body.append("Subject: ", style="bold")
    body.append(f"{email.subject}\n\n")
    body.append(email.body)
    if email.thread:
        body.append(f"\n\n{len(email.thread)} earlier message(s) in thread", style=palette.muted)
    return _panel(body, title, palette)


# ---------------------------------------------------------------------------
# Analyses
# ---------------------------------------------------------------------------


def render_analysis(
    analysis: Optional[EmailAnalysisResult], is_loading: bool, palette: Palette
) -> Optional[Panel]:
    if is_loading:
        return _loading(palette, "Email Analysis")
    if analysis is None:
        return None

    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Sentiment", Text(analysis.sentiment))
    table.add_row("Urgency", Text(analysis.urgency))
    table.add_row("Intent", Text(analysis.intent))

    parts: List[RenderableType] = [table]
    if analysis.key_points:
        parts.append(Text("\nKey points", style=palette.accent_bold))
        parts.append(_bullets(analysis.key_points, palette))
    if analysis.next_actions:
        parts.append(Text("\nNext actions", style=palette.accent_bold))
        parts.append(_bullets(analysis.next_actions, palette))
    return _panel(Group(*parts), "Email Analysis", palette)


def render_follow_up(
    analysis: Optional[FollowUpAnalysis], is_loading: bool, palette: Palette
) -> Optional[Panel]:
    if is_loading:
        return _loading(palette, "Follow-up")
    if analysis is None:
        return None

    body = Text()
    if analysis.is_closed:
        body.append("Conversation closed", style="bold green")
    elif analysis.requires_follow_up:
        body.append("Follow-up required", style="bold yellow")
    else:
        body.append("No follow-up needed", style="bold")
    if analysis.reason:
        body.append(f"\n{analysis.reason}")
    if analysis.suggested_reminder:
        body.append("\nReminder: ", style=palette.accent_bold)
        body.append(analysis.suggested_reminder)
    return _panel(body, "Follow-up", palette)


# ---------------------------------------------------------------------------
# Instructions and suggestions
# ---------------------------------------------------------------------------


def render_instructions(
    tone: Tone, instruction: str, is_loading: bool, palette: Palette
) -> Panel:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Tone", tone.value)
    table.add_row("Instruction", Text(instruction) if instruction else Text("(none)", style=palette.muted))
    hint = "generating…" if is_loading else "tone <n|name> · instruct <text> · apply"
    return _panel(
        Group(table, Text(hint, style=palette.muted)),
        "Instructions",
        palette,
    )


def render_tone_list(tones: Sequence[Tone], selected: Tone, palette: Palette) -> Table:
    table = Table(title="Tones", title_style=palette.accent_bold)
    table.add_column("#", justify="right")
    table.add_column("Tone")
    for i, tone in enumerate(tones, start=1):
        style = palette.accent_bold if tone == selected else None
        table.add_row(str(i), tone.value, style=style)
    return table


def render_suggestions(
    suggestions: Sequence[str],
    is_loading: bool,
    show_back: bool,
    suggestion_count: int,
    palette: Palette,
) -> Panel:
    title = "Suggested Replies"
    if is_loading:
        rows = [Text(f"{i}. {LOADING_TEXT}", style=palette.muted) for i in range(1, suggestion_count + 1)]
        return _panel(Group(*rows), title, palette, border=palette.muted)

    if not suggestions:
        return _panel(Text("No suggestions yet.", style=palette.muted), title, palette)

    parts: List[RenderableType] = []
    for i, suggestion in enumerate(suggestions, start=1):
        item = Text()
        item.append(f"{i}. ", style=palette.accent_bold)
        item.append(suggestion)
        if i < len(suggestions):
            item.append("\n")
        parts.append(item)
    if show_back:
        parts.append(Text("\n'back' restores the previous suggestions", style=palette.muted))
    return _panel(Group(*parts), title, palette)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def render_settings(settings: AppSettings, palette: Palette) -> Panel:
    table = Table(show_header=True, header_style=palette.accent_bold, expand=False)
    table.add_column("Setting")
    table.add_column("Value")
    for name, value in settings.model_dump(mode="json").items():
        if isinstance(value, bool):
            shown = "on" if value else "off"
        elif value == "":
            shown = "(empty)"
        else:
            shown = str(value)
        table.add_row(name, Text(shown))
    hint = Text("set <setting> <value> · reset", style=palette.muted)
    return _panel(Group(table, hint), "Settings", palette)


# ---------------------------------------------------------------------------
# Whole panel
# ---------------------------------------------------------------------------


def render_panel(state: PanelState, settings: AppSettings, theme: Theme) -> Group:
    """Compose the visible sections in display order."""
    palette = build_palette(settings, theme)
    sections: List[Optional[RenderableType]] = [
        render_header(palette, is_dark_mode=theme == Theme.DARK),
        render_error(state.error, palette),
    ]
    if settings.show_security:
        sections.append(render_security(state.security, state.security_loading, palette))
    if settings.show_email:
        sections.append(render_email(state.email, state.email_expanded, palette))
    if settings.show_analysis:
        sections.append(render_analysis(state.analysis, state.analysis_loading, palette))
    if settings.show_follow_up:
        sections.append(render_follow_up(state.follow_up, state.follow_up_loading, palette))
    if settings.show_instructions:
        sections.append(
            render_instructions(state.tone, state.instruction, state.is_loading, palette)
        )
    sections.append(
        render_suggestions(
            state.suggestions,
            state.suggestions_loading,
            state.can_go_back,
            settings.suggestion_count,
            palette,
        )
    )
    return Group(*(s for s in sections if s is not None))
