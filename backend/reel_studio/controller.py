"""Reel studio state machine.

The controller owns every piece of UI state and only changes it through the
command methods below. The UI reads ``state`` (a snapshot) and calls
commands in response to user actions.

Phases::

    IDLE -> FETCHING_NEWS -> NEWS_READY -> GENERATING_SCRIPT -> SCRIPT_READY

Custom text and video submissions enter GENERATING_SCRIPT straight from
IDLE or NEWS_READY. Failed news selections fall back to NEWS_READY while
failed text/video submissions fall back to IDLE.
"""

from __future__ import annotations

import logging
import time
import weakref
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from reel_studio.ai.errors import ReelServiceError
from reel_studio.audio import (
    AudioPlaybackError,
    AudioPlayer,
    AudioStore,
    create_wav_bytes,
    decode_base64_audio,
    wav_duration,
)
from reel_studio.export import ExportedDocument, export_script_to_docx
from reel_studio.models import NewsItem, Script, UploadedVideo
from reel_studio.translations import DEFAULT_LANGUAGE, LANGUAGES, format_date, t

logger = logging.getLogger(__name__)

CUSTOM_TEXT_LIMIT = 700
USER_SOURCE = "User"
USER_VIDEO_SOURCE = "User Video"


class Phase(str, Enum):
    IDLE = "idle"
    FETCHING_NEWS = "fetchingNews"
    NEWS_READY = "newsReady"
    GENERATING_SCRIPT = "generatingScript"
    SCRIPT_READY = "scriptReady"


class Tab(str, Enum):
    NEWS = "news"
    TEXT = "text"
    VIDEO = "video"


INPUT_PHASES = (Phase.IDLE, Phase.NEWS_READY)


@dataclass
class ReelState:
    phase: Phase = Phase.IDLE
    active_tab: Tab = Tab.NEWS
    language: str = DEFAULT_LANGUAGE
    news_items: Tuple[NewsItem, ...] = ()
    selected_news: Optional[NewsItem] = None
    script: Optional[Script] = None
    custom_text: str = ""
    edit_command: str = ""
    is_editing: bool = False
    video_file: Optional[UploadedVideo] = None
    is_generating_audio: bool = False
    error: Optional[str] = None


class ReelController:
    def __init__(
        self,
        service: Any,
        audio_store: AudioStore | None = None,
        exporter: Callable[[Script, NewsItem, str], ExportedDocument] = export_script_to_docx,
        today: Callable[[], date] = date.today,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._service = service
        self._player = AudioPlayer(audio_store or AudioStore(), clock=clock)
        self._exporter = exporter
        self._today = today
        self._state = ReelState()
        self._epoch = 0
        self._disposed = False
        self._export_key: Optional[Tuple[Script, NewsItem, str]] = None
        self._export: Optional[ExportedDocument] = None
        # Sessions that end without dispose() still give their audio file back.
        self._finalizer = weakref.finalize(self, self._player.release)

    # -- read side -----------------------------------------------------------

    @property
    def state(self) -> ReelState:
        return replace(self._state)

    @property
    def has_audio(self) -> bool:
        return self._player.has_audio

    @property
    def is_playing(self) -> bool:
        return self._player.is_playing

    @property
    def audio_url(self) -> str | None:
        return self._player.resource.url if self._player.resource else None

    def audio_bytes(self) -> bytes:
        return self._player.read()

    # -- helpers -------------------------------------------------------------

    def _t(self, key: str) -> str:
        return t(key, self._state.language)

    def _accepts(self, *phases: Phase) -> bool:
        if self._disposed:
            return False
        return self._state.phase in phases

    def _is_current(self, token: int) -> bool:
        return not self._disposed and token == self._epoch

    def _fail(self, exc: Exception, default_key: str = "unknownError") -> None:
        logger.warning("Reel action failed: %s", exc, exc_info=not isinstance(exc, ReelServiceError))
        self._state.error = str(exc) or self._t(default_key)

    def _release_audio(self) -> None:
        self._player.release()

    def _placeholder_news(self, headline: str, source: str, summary: str) -> NewsItem:
        return NewsItem(
            headline=headline,
            date=format_date(self._today(), self._state.language),
            source=source,
            summary=summary,
        )

    def _run_generation(self, call: Callable[[], Any], empty_key: str, failure_phase: Phase) -> None:
        token = self._epoch
        try:
            result = call()
            if not self._is_current(token):
                logger.info("Dropping script result that arrived after the flow was left")
                return
            if result.is_empty:
                raise ReelServiceError(self._t(empty_key))
            self._state.script = result.unwrap()
            self._state.phase = Phase.SCRIPT_READY
        except Exception as exc:
            if not self._is_current(token):
                return
            self._fail(exc)
            self._state.phase = failure_phase

    def _start_generation(self, item: NewsItem) -> None:
        self._release_audio()
        self._state.phase = Phase.GENERATING_SCRIPT
        self._state.selected_news = item
        self._state.error = None
        self._state.script = None

    # -- simple inputs -------------------------------------------------------

    def set_language(self, language: str) -> None:
        if language not in LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self._state.language = language

    def set_tab(self, tab: Tab | str) -> None:
        self._state.active_tab = Tab(tab)

    def set_custom_text(self, text: str) -> None:
        self._state.custom_text = (text or "")[:CUSTOM_TEXT_LIMIT]

    def set_edit_command(self, command: str) -> None:
        self._state.edit_command = command or ""

    def toggle_editing(self) -> None:
        self._state.is_editing = not self._state.is_editing

    # -- news flow -----------------------------------------------------------

    def fetch_news(self) -> None:
        if not self._accepts(*INPUT_PHASES):
            return
        self._state.phase = Phase.FETCHING_NEWS
        self._state.error = None
        self._state.news_items = ()
        token = self._epoch
        try:
            items = self._service.fetch_news(self._state.language)
            if not self._is_current(token):
                return
            self._state.news_items = tuple(items)
            self._state.phase = Phase.NEWS_READY
        except Exception as exc:
            if not self._is_current(token):
                return
            self._fail(exc)
            self._state.phase = Phase.IDLE

    def select_news(self, item: NewsItem) -> None:
        if not self._accepts(Phase.NEWS_READY):
            return
        self._start_generation(item)
        language = self._state.language
        self._run_generation(
            lambda: self._service.generate_script(item, language),
            "emptyScriptError",
            Phase.NEWS_READY,
        )

    # -- custom text flow ----------------------------------------------------

    def submit_custom_text(self) -> None:
        if not self._accepts(*INPUT_PHASES):
            return
        text = self._state.custom_text
        if not text.strip():
            self._state.error = self._t("emptyContentError")
            return
        self._start_generation(
            self._placeholder_news(self._t("customTextButton"), USER_SOURCE, text)
        )
        language = self._state.language
        self._run_generation(
            lambda: self._service.generate_script_from_text(text, language),
            "emptyScriptError",
            Phase.IDLE,
        )

    # -- video flow ----------------------------------------------------------

    def select_video(self, video: UploadedVideo | None) -> bool:
        """Store ``video`` if it is a video file; return whether it was accepted."""
        if video is None or self._disposed:
            return False
        if not video.is_video:
            self._state.error = self._t("invalidVideoError")
            return False
        self._state.video_file = video
        self._state.error = None
        return True

    def submit_video(self) -> None:
        if not self._accepts(*INPUT_PHASES):
            return
        video = self._state.video_file
        if video is None:
            self._state.error = self._t("emptyVideoError")
            return
        self._start_generation(
            self._placeholder_news(video.name, USER_VIDEO_SOURCE, self._t("videoSummary"))
        )
        language = self._state.language

        def _call():
            payload, mime_type = video.to_base64()
            return self._service.generate_script_from_video(payload, mime_type, language)

        self._run_generation(_call, "emptyVideoScriptError", Phase.IDLE)

    # -- script actions ------------------------------------------------------

    def edit_script(self) -> None:
        state = self._state
        if not self._accepts(Phase.SCRIPT_READY):
            return
        if not state.script or not state.selected_news or not state.edit_command.strip():
            return
        script, item, command, language = state.script, state.selected_news, state.edit_command, state.language
        state.is_editing = False
        state.phase = Phase.GENERATING_SCRIPT
        state.error = None
        token = self._epoch
        try:
            result = self._service.edit_script(item, script, command, language)
            if not self._is_current(token):
                return
            if result.is_empty:
                raise ReelServiceError(self._t("editScriptError"))
            state.script = result.unwrap()
            # Old narration no longer matches the edited text.
            self._release_audio()
        except Exception as exc:
            if self._is_current(token):
                self._fail(exc)
        finally:
            if self._is_current(token):
                state.phase = Phase.SCRIPT_READY
                state.edit_command = ""

    def generate_audio(self) -> None:
        state = self._state
        if not self._accepts(Phase.SCRIPT_READY) or state.is_generating_audio:
            return
        if not state.script or not state.script.clean_audio_text:
            return
        state.is_generating_audio = True
        state.error = None
        token = self._epoch
        try:
            result = self._service.synthesize_speech(state.script.clean_audio_text, state.language)
            if not self._is_current(token) or result.is_empty:
                return
            wav_bytes = create_wav_bytes(decode_base64_audio(result.unwrap()))
            self._player.load(wav_bytes, duration=wav_duration(wav_bytes))
            self._play()
        except Exception as exc:
            if self._is_current(token):
                self._fail(exc)
        finally:
            if self._is_current(token):
                state.is_generating_audio = False

    def _play(self) -> None:
        try:
            self._player.play()
        except AudioPlaybackError as exc:
            logger.warning("Audio playback failed: %s", exc)
            self._state.error = self._t("audioPlayError")

    def toggle_playback(self) -> None:
        if self._disposed or not self._player.has_audio:
            return
        if self._player.is_playing:
            self._player.stop()
        else:
            self._play()

    def audio_ended(self) -> None:
        self._player.ended()

    def sync_playback(self) -> None:
        """Mark playback as ended once the clip has run its full length."""
        if self._player.finished:
            self.audio_ended()

    def download(self) -> ExportedDocument | None:
        state = self._state
        if state.script is None or state.selected_news is None:
            return None
        key = (state.script, state.selected_news, state.language)
        if self._export is None or self._export_key != key:
            self._export = self._exporter(*key)
            self._export_key = key
        return self._export

    def back(self) -> None:
        if self._disposed:
            return
        self._epoch += 1
        state = self._state
        state.script = None
        state.selected_news = None
        state.error = None
        state.custom_text = ""
        state.is_editing = False
        state.edit_command = ""
        state.video_file = None
        state.is_generating_audio = False
        self._release_audio()
        state.phase = Phase.NEWS_READY if state.news_items else Phase.IDLE
        state.active_tab = Tab.NEWS

    def dispose(self) -> None:
        """Release held resources; results that arrive later are ignored."""
        self._epoch += 1
        self._finalizer()
        self._disposed = True
