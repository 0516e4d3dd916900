"""
Pop It Bubble - Pop Sound Manager
Generates the pop variations at startup and plays them round-robin with jitter
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
import pygame

from popit.core.constants import (
    SAMPLE_RATE, POP_VARIATIONS, AUDIO_ENABLED, MASTER_VOLUME, SFX_VOLUME,
    MAX_STREAMS, PLAY_PRIORITY, PLAY_LOOP,
    PITCH_MIN, PITCH_MAX, VOLUME_MIN, VOLUME_MAX
)
from popit.core.logger import get_audio_logger
from popit.audio.errors import AudioError, EncodingUnavailable
from popit.audio.sound_store import SoundStore
from popit.audio.synth import PopSynthesizer
from popit.audio.wav_encoder import encode


class RoundRobinSelector:
    """Cycles through a pool; the k-th call selects index k mod pool_size."""
    
    def __init__(self):
        self.counter = 0
    
    def next_index(self, pool_size: int) -> Optional[int]:
        if pool_size <= 0:
            return None
        index = self.counter % pool_size
        self.counter += 1
        return index


def sample_jitter(rng: np.random.Generator) -> Tuple[float, float]:
    """Draw an independent (pitch, volume) pair for one trigger."""
    pitch = float(rng.uniform(PITCH_MIN, PITCH_MAX))
    volume = float(rng.uniform(VOLUME_MIN, VOLUME_MAX))
    return pitch, volume


def resample_for_pitch(samples: np.ndarray, rate: float) -> np.ndarray:
    """
    Linear-interpolation resample so playback at the mixer rate sounds
    `rate` times higher. Works on (n,) or (n, channels) arrays.
    """
    if rate <= 0:
        raise ValueError(f"Pitch rate must be positive, got {rate}")
    n_in = samples.shape[0]
    if n_in == 0:
        return samples.copy()
    
    n_out = max(1, int(round(n_in / rate)))
    positions = np.arange(n_out, dtype=np.float64) * rate
    source = np.arange(n_in, dtype=np.float64)
    
    if samples.ndim == 1:
        out = np.interp(positions, source, samples)
    else:
        out = np.column_stack([
            np.interp(positions, source, samples[:, ch]) for ch in range(samples.shape[1])
        ])
    return np.ascontiguousarray(np.rint(out).astype(samples.dtype))


class PlaybackBackend:
    """Something that can load pop containers and play them with per-trigger parameters."""
    
    def load(self, path: Path) -> int:
        """Load a container; returns an id > 0, or 0 on failure."""
        raise NotImplementedError
    
    def is_loaded(self, sound_id: int) -> bool:
        raise NotImplementedError
    
    def play(self, sound_id: int, left: float, right: float,
             priority: int, loop: int, rate: float):
        raise NotImplementedError
    
    def release(self):
        raise NotImplementedError


class PygameBackend(PlaybackBackend):
    """pygame.mixer playback; pitch is applied by resampling, priority is unused."""
    
    def __init__(self, max_streams: int = MAX_STREAMS, frequency: int = SAMPLE_RATE):
        self._owns_mixer = False
        if not pygame.mixer.get_init():
            pygame.mixer.init(frequency=frequency, size=-16, channels=1)
            self._owns_mixer = True
        try:
            pygame.mixer.set_num_channels(max_streams)
        except pygame.error:
            if self._owns_mixer:
                pygame.mixer.quit()
            raise
        self.sounds: Dict[int, pygame.mixer.Sound] = {}
        self._next_id = 1
    
    def load(self, path: Path) -> int:
        try:
            sound = pygame.mixer.Sound(str(path))
        except pygame.error as e:
            get_audio_logger().error(f"Failed to load {path}: {e}")
            return 0
        sound_id = self._next_id
        self._next_id += 1
        self.sounds[sound_id] = sound
        return sound_id
    
    def is_loaded(self, sound_id: int) -> bool:
        return sound_id in self.sounds
    
    def play(self, sound_id: int, left: float, right: float,
             priority: int, loop: int, rate: float):
        sound = self.sounds[sound_id]
        try:
            if abs(rate - 1.0) > 1e-6:
                pitched = resample_for_pitch(pygame.sndarray.array(sound), rate)
                sound = pygame.sndarray.make_sound(pitched)
            channel = sound.play(loops=loop)
        except pygame.error as e:
            raise EncodingUnavailable(f"Mixer rejected sound {sound_id}: {e}") from e
        
        # None when every stream is busy
        if channel is not None:
            channel.set_volume(left, right)
    
    def release(self):
        if pygame.mixer.get_init():
            pygame.mixer.stop()
            if self._owns_mixer:
                pygame.mixer.quit()
        self.sounds.clear()


def _audio_setting(settings, key: str, cast, default):
    """Read one audio setting, falling back to the default on a bad value."""
    value = settings.get("audio", key)
    if value is not None and (cast is not bool or isinstance(value, bool)):
        try:
            return cast(value)
        except (TypeError, ValueError):
            pass
    get_audio_logger().warning(f"Invalid audio setting {key}={value!r}, using {default!r}")
    return default


class PopSoundManager:
    def __init__(self, backend: Optional[PlaybackBackend] = None,
                 store: Optional[SoundStore] = None,
                 variations: Optional[int] = None,
                 seed: Optional[int] = None,
                 settings=None):
        """
        Args:
            backend: Playback backend (pygame mixer if omitted)
            store: Where containers are written (private temp dir if omitted)
            variations: Number of timbre presets to generate
            seed: Seeds both the noise and the per-trigger jitter
            settings: Optional SettingsManager supplying the audio section
        """
        self.enabled = AUDIO_ENABLED
        self.master_volume = MASTER_VOLUME
        self.sfx_volume = SFX_VOLUME
        num_variations = POP_VARIATIONS
        
        if settings is not None:
            self.enabled = _audio_setting(settings, "enabled", bool, AUDIO_ENABLED)
            self.master_volume = _audio_setting(settings, "master_volume", float, MASTER_VOLUME)
            self.sfx_volume = _audio_setting(settings, "sfx_volume", float, SFX_VOLUME)
            num_variations = _audio_setting(settings, "variations", int, POP_VARIATIONS)
        if variations is not None:
            num_variations = variations
        
        synth_seed, jitter_seed = np.random.SeedSequence(seed).spawn(2)
        self.synth = PopSynthesizer(rng=np.random.default_rng(synth_seed))
        self.jitter_rng = np.random.default_rng(jitter_seed)
        self.selector = RoundRobinSelector()
        self.pop_sound_ids: List[int] = []
        self.backend = backend
        self.store = store
        self.released = False
        
        if not self.enabled:
            get_audio_logger().info("Pop sounds disabled by settings")
            return
        
        if self.backend is None:
            try:
                self.backend = PygameBackend()
            except pygame.error as e:
                get_audio_logger().error(f"Failed to initialize audio mixer: {e}", exc_info=True)
                self.enabled = False
                return
        
        if self.store is None:
            try:
                self.store = SoundStore()
            except EncodingUnavailable as e:
                get_audio_logger().error(f"Failed to prepare pop sound storage: {e}", exc_info=True)
                self.backend.release()
                self.enabled = False
                return
        
        for variation in range(num_variations):
            self._generate_and_load(variation)
        get_audio_logger().info(f"Loaded {len(self.pop_sound_ids)}/{num_variations} pop variations")
    
    def _generate_and_load(self, variation: int):
        pcm = self.synth.synthesize(variation)
        wav_bytes = encode(pcm, self.synth.sample_rate)
        try:
            path = self.store.write(variation, wav_bytes)
            sound_id = self.backend.load(path)
            if sound_id <= 0:
                raise EncodingUnavailable(f"Backend rejected {path}")
        except EncodingUnavailable as e:
            get_audio_logger().warning(f"Skipping pop variation {variation}: {e}")
            return
        self.pop_sound_ids.append(sound_id)
    
    def play_pop(self) -> bool:
        """Play the next pop. Returns False when nothing was played."""
        if not self.enabled or self.released or not self.pop_sound_ids:
            return False
        
        index = self.selector.next_index(len(self.pop_sound_ids))
        sound_id = self.pop_sound_ids[index]
        if not self.backend.is_loaded(sound_id):
            return False
        
        # Slight pitch variation for natural feel
        pitch, volume = sample_jitter(self.jitter_rng)
        volume *= self.master_volume * self.sfx_volume
        try:
            self.backend.play(sound_id, volume, volume, PLAY_PRIORITY, PLAY_LOOP, pitch)
        except AudioError as e:
            get_audio_logger().error(f"Failed to play pop {sound_id}: {e}")
            return False
        return True
    
    def set_master_volume(self, volume: float):
        self.master_volume = max(0.0, min(1.0, volume))
    
    def set_sfx_volume(self, volume: float):
        self.sfx_volume = max(0.0, min(1.0, volume))
    
    def release(self):
        """Stop playback and delete the generated files."""
        if self.released:
            return
        self.released = True
        if self.backend is not None:
            self.backend.release()
        if self.store is not None:
            self.store.cleanup()
        self.pop_sound_ids.clear()
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
