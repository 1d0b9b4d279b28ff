"""
Application controller: owns all panel state and sequences the AI calls.

Core pieces:
- initial_load: email -> analysis -> suggestions, strictly in order
- regenerate_suggestions: new drafts, previous list kept on a history stack
- go_back: restore the previous list of drafts
- theme derivation and manual toggling
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .ai_service import AnalysisService, SuggestionService
from .constants import ANALYSIS_UNAVAILABLE, INITIAL_LOAD_ERROR, REGENERATE_ERROR
from .email_source import EmailSource
from .models import (
    Email,
    EmailAnalysisResult,
    FollowUpAnalysis,
    SecurityAnalysis,
    SecurityStatus,
    Theme,
    Tone,
)
from .settings_store import SettingsStore
from .theme import SystemThemeProvider, detect_system_theme, resolve_theme

logger = logging.getLogger(__name__)

Suggestions = Tuple[str, ...]


@dataclass
class PanelState:
    email: Optional[Email] = None
    security: Optional[SecurityAnalysis] = None
    analysis: Optional[EmailAnalysisResult] = None
    follow_up: Optional[FollowUpAnalysis] = None
    suggestions: Suggestions = ()
    # Snapshots of previously shown lists, most recent last
    history: List[Suggestions] = field(default_factory=list)
    tone: Tone = Tone.DEFAULT
    instruction: str = ""
    is_loading: bool = False
    error: Optional[str] = None
    email_expanded: bool = False

    @property
    def security_loading(self) -> bool:
        return self.is_loading and self.security is None

    @property
    def analysis_loading(self) -> bool:
        return self.is_loading and self.analysis is None

    @property
    def follow_up_loading(self) -> bool:
        return self.is_loading and self.follow_up is None

    @property
    def suggestions_loading(self) -> bool:
        return self.is_loading and not self.suggestions

    @property
    def can_go_back(self) -> bool:
        return len(self.history) > 0


class AppController:
    def __init__(
        self,
        email_source: EmailSource,
        analysis_service: AnalysisService,
        suggestion_service: SuggestionService,
        settings_store: Optional[SettingsStore] = None,
        system_theme: SystemThemeProvider = detect_system_theme,
    ):
        self._email_source = email_source
        self._analysis_service = analysis_service
        self._suggestion_service = suggestion_service
        self.settings_store = settings_store or SettingsStore()
        self._system_theme = system_theme
        self.state = PanelState()
        # Outstanding calls; loading stays on until all of them settle.
        self._pending = 0

    # ------------------------------------------------------------------
    # Loading bookkeeping
    # ------------------------------------------------------------------

    def _begin(self) -> None:
        self._pending += 1
        self.state.is_loading = True

    def _end(self) -> None:
        self._pending -= 1
        self.state.is_loading = self._pending > 0

    # ------------------------------------------------------------------
    # AI calls
    # ------------------------------------------------------------------

    async def initial_load(self) -> None:
        """
        Fetch the email, analyze it, then generate the first suggestions.

        Results of a previous load are cleared first. A failure before the
        analysis lands sets the load error and falls back to a "safe, could
        not analyze" security result. A failure generating the suggestions is
        reported by regenerate_suggestions and leaves the analysis panels
        populated.
        """
        self._begin()
        self.state.error = None
        self.state.security = None
        self.state.analysis = None
        self.state.follow_up = None
        try:
            try:
                email = await self._email_source.get_current_email()
                self.state.email = email
                logger.info("Loaded email id=%s subject=%r", email.id, email.subject)

                result = await self._analysis_service.analyze(email)
            except Exception as e:
                logger.exception("Initial load failed: %s", e)
                self.state.error = INITIAL_LOAD_ERROR
                self.state.security = SecurityAnalysis(
                    status=SecurityStatus.SAFE,
                    details=ANALYSIS_UNAVAILABLE,
                )
                return

            self.state.security = result.security
            self.state.analysis = result.to_email_analysis()
            self.state.follow_up = result.follow_up

            settings = self.settings_store.settings
            await self.regenerate_suggestions(
                email,
                self.state.tone,
                self.state.instruction,
                settings.suggestion_count,
                settings.system_instruction,
            )
        finally:
            self._end()

    async def regenerate_suggestions(
        self,
        email: Email,
        tone: Tone,
        instruction: str,
        count: int,
        system_instruction: str,
    ) -> bool:
        """
        Replace the displayed suggestions with a fresh set.

        The displayed list (if any) is pushed onto the history stack when the
        request starts, whether or not it then succeeds. On failure the error
        banner is set and the displayed list is left alone. Returns whether new
        suggestions were installed.
        """
        self._begin()
        self.state.error = None
        current = self.state.suggestions
        if current:
            self.state.history.append(current)
        try:
            try:
                result = await self._suggestion_service.generate_suggestions(
                    email, tone, instruction, count, system_instruction
                )
            except Exception as e:
                logger.exception("Suggestion generation failed: %s", e)
                self.state.error = REGENERATE_ERROR
                return False

            self.state.suggestions = tuple(result)
            logger.debug(
                "Installed %d suggestions (history depth %d)",
                len(self.state.suggestions),
                len(self.state.history),
            )
            return True
        finally:
            self._end()

    async def apply_instructions(self) -> bool:
        """Regenerate with the selected tone and instruction and the live settings."""
        email = self.state.email
        if email is None:
            logger.debug("No email loaded; ignoring apply.")
            return False

        settings = self.settings_store.settings
        return await self.regenerate_suggestions(
            email,
            self.state.tone,
            self.state.instruction,
            settings.suggestion_count,
            settings.system_instruction,
        )

    # ------------------------------------------------------------------
    # Local edits
    # ------------------------------------------------------------------

    def set_tone(self, tone: Tone) -> None:
        self.state.tone = tone

    def set_instruction(self, instruction: str) -> None:
        self.state.instruction = instruction

    def go_back(self) -> bool:
        """Restore the most recent previous list. No-op on an empty history."""
        if not self.state.history:
            return False
        self.state.suggestions = self.state.history.pop()
        return True

    def toggle_email_expanded(self) -> bool:
        self.state.email_expanded = not self.state.email_expanded
        return self.state.email_expanded

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    @property
    def effective_theme(self) -> Theme:
        return resolve_theme(self.settings_store.settings, self._system_theme)

    def toggle_theme(self) -> Theme:
        """Switch to the opposite of the theme on screen and stop syncing."""
        new_theme = self.effective_theme.flipped()
        self.settings_store.update(sync_with_system=False, theme=new_theme)
        return new_theme
