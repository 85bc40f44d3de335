from __future__ import annotations

import logging
from typing import Dict, Optional

import numpy as np
import pygame

from falling_blocks.game.signals import GAME_OVER, LINE_CLEAR, MOVE, ROTATE, STARTED, GameSignals


logger = logging.getLogger(__name__)

# (frequency Hz, duration ms) per cue
CUES = {
    MOVE: (330.0, 40),
    ROTATE: (520.0, 60),
    LINE_CLEAR: (880.0, 220),
    GAME_OVER: (110.0, 700),
}

# Background loop: a slow A minor arpeggio
MUSIC_NOTES = [(220.0, 300), (261.63, 300), (329.63, 300), (261.63, 300)]


def _tone(freq: float, duration_ms: int, sample_rate: int, channels: int, volume: float = 0.3) -> np.ndarray:
    n = int(sample_rate * duration_ms / 1000)
    t = np.arange(n) / sample_rate
    envelope = np.linspace(1.0, 0.0, n)
    wave = (np.sin(2 * np.pi * freq * t) * envelope * volume * 32767).astype(np.int16)
    if channels == 1:
        return wave
    return np.repeat(wave[:, None], channels, axis=1)


class SoundBoard:
    """Plays a short synthesized cue for each audio signal of a session.

    A looping background track starts with every game and stops at game over.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.sounds: Dict[str, pygame.mixer.Sound] = {}
        self.music: Optional[pygame.mixer.Sound] = None
        self.music_channel: Optional[pygame.mixer.Channel] = None
        if not enabled:
            return
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init()
            sample_rate, _, channels = pygame.mixer.get_init()
            for name, (freq, ms) in CUES.items():
                self.sounds[name] = pygame.sndarray.make_sound(_tone(freq, ms, sample_rate, channels))
            track = np.concatenate([_tone(f, ms, sample_rate, channels, volume=0.1) for f, ms in MUSIC_NOTES])
            self.music = pygame.sndarray.make_sound(track)
        except pygame.error as exc:
            logger.warning("audio disabled: %s", exc)
            self.sounds = {}
            self.music = None

    @property
    def enabled(self) -> bool:
        return bool(self.sounds)

    def attach(self, signals: GameSignals) -> None:
        for name in CUES:
            signals.subscribe(name, self._player(name))
        signals.subscribe(STARTED, self._on_started)
        signals.subscribe(GAME_OVER, self._on_game_over)

    def _player(self, name: str):
        def play(sender, **payload) -> None:
            self.play(name)
        return play

    def _on_started(self, sender, **payload) -> None:
        self.start_music()

    def _on_game_over(self, sender, **payload) -> None:
        self.stop_music()

    def play(self, name: str) -> Optional[pygame.mixer.Channel]:
        sound = self.sounds.get(name)
        if sound is None:
            return None
        return sound.play()

    def start_music(self) -> Optional[pygame.mixer.Channel]:
        self.stop_music()
        if self.music is not None:
            self.music_channel = self.music.play(loops=-1)
        return self.music_channel

    def stop_music(self) -> None:
        if self.music_channel is not None:
            self.music_channel.stop()
            self.music_channel = None
