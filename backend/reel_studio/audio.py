"""Narration audio: PCM decoding, WAV wrapping and transient playback files."""

from __future__ import annotations

import base64
import io
import logging
import struct
import tempfile
import time
import uuid
import wave
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

SAMPLE_RATE = 24000
CHANNELS = 1
SAMPLE_WIDTH = 2


class AudioPlaybackError(RuntimeError):
    """Raised when there is nothing playable behind the player."""


@dataclass(frozen=True)
class WavAudio:
    pcm: bytes
    sample_rate: int
    channels: int
    sample_width: int


def decode_base64_audio(payload: str) -> bytes:
    return base64.b64decode(payload)


def samples_to_pcm(samples: Sequence[int]) -> bytes:
    """Pack signed 16-bit samples as little-endian PCM."""
    return struct.pack(f"<{len(samples)}h", *samples)


def pcm_to_samples(pcm: bytes) -> List[int]:
    count = len(pcm) // SAMPLE_WIDTH
    return list(struct.unpack(f"<{count}h", pcm[: count * SAMPLE_WIDTH]))


def create_wav_bytes(
    pcm: bytes,
    sample_rate: int = SAMPLE_RATE,
    channels: int = CHANNELS,
    sample_width: int = SAMPLE_WIDTH,
) -> bytes:
    """Wrap raw interleaved PCM in a WAV container."""
    frame_size = channels * sample_width
    usable = len(pcm) - (len(pcm) % frame_size)
    if usable != len(pcm):
        logger.warning("Dropping %d trailing byte(s) of partial PCM frame", len(pcm) - usable)

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(sample_width)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm[:usable])
    return buffer.getvalue()


def read_wav(data: bytes) -> WavAudio:
    with wave.open(io.BytesIO(data), "rb") as wf:
        return WavAudio(
            pcm=wf.readframes(wf.getnframes()),
            sample_rate=wf.getframerate(),
            channels=wf.getnchannels(),
            sample_width=wf.getsampwidth(),
        )


def wav_duration(data: bytes) -> float:
    """Length of a WAV container in seconds."""
    with wave.open(io.BytesIO(data), "rb") as wf:
        return wf.getnframes() / float(wf.getframerate())


@dataclass(frozen=True)
class AudioResource:
    url: str
    path: Path


class AudioStore:
    """Owns the temp files that back playable audio URLs.

    ``create`` hands out a URL; ``revoke`` deletes the file behind it. A
    revoked URL is never served again.
    """

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root) if root else Path(tempfile.gettempdir()) / "reel_studio_audio"
        self._live: Dict[str, Path] = {}

    @property
    def root(self) -> Path:
        return self._root

    def create(self, wav_bytes: bytes) -> AudioResource:
        self._root.mkdir(parents=True, exist_ok=True)
        path = self._root / f"narration_{uuid.uuid4().hex}.wav"
        path.write_bytes(wav_bytes)
        url = path.as_uri()
        self._live[url] = path
        logger.info("Created audio resource %s (%d bytes)", url, len(wav_bytes))
        return AudioResource(url=url, path=path)

    def revoke(self, url: str) -> None:
        path = self._live.pop(url, None)
        if path is None:
            return
        path.unlink(missing_ok=True)
        logger.info("Revoked audio resource %s", url)

    def read(self, url: str) -> bytes:
        path = self._live.get(url)
        if path is None or not path.exists():
            raise AudioPlaybackError(f"Audio resource {url} is not available")
        return path.read_bytes()

    def live_urls(self) -> List[str]:
        return list(self._live)

    def purge_stale(self) -> int:
        """Delete narration files under ``root`` that this store does not own.

        Leftovers from a previous process are never served again, so they
        only take up disk space.
        """
        if not self._root.is_dir():
            return 0
        owned = set(self._live.values())
        removed = 0
        for path in self._root.glob("narration_*.wav"):
            if path in owned:
                continue
            path.unlink(missing_ok=True)
            removed += 1
        if removed:
            logger.info("Removed %d stale audio file(s) from %s", removed, self._root)
        return removed


class AudioPlayer:
    """Two-state (playing/stopped) player over a single audio resource.

    When the clip length is known, ``finished`` reports whether playback has
    run past the end since the last ``play``.
    """

    def __init__(self, store: AudioStore, clock: Callable[[], float] = time.monotonic):
        self._store = store
        self._clock = clock
        self.resource: AudioResource | None = None
        self.duration: Optional[float] = None
        self.is_playing = False
        self._started_at = 0.0

    @property
    def has_audio(self) -> bool:
        return self.resource is not None

    @property
    def finished(self) -> bool:
        if not self.is_playing or self.duration is None:
            return False
        return self._clock() - self._started_at >= self.duration

    def load(self, wav_bytes: bytes, duration: float | None = None) -> AudioResource:
        self.release()
        self.resource = self._store.create(wav_bytes)
        self.duration = duration
        return self.resource

    def play(self) -> None:
        if self.resource is None or not self.resource.path.exists():
            self.is_playing = False
            raise AudioPlaybackError("No audio loaded")
        self.is_playing = True
        self._started_at = self._clock()

    def stop(self) -> None:
        self.is_playing = False

    def ended(self) -> None:
        self.is_playing = False

    def read(self) -> bytes:
        if self.resource is None:
            raise AudioPlaybackError("No audio loaded")
        return self._store.read(self.resource.url)

    def release(self) -> None:
        # Safe to call repeatedly.
        self.stop()
        if self.resource is not None:
            self._store.revoke(self.resource.url)
            self.resource = None
            self.duration = None
