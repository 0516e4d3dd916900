"""
Pop It Bubble - Procedural Pop Synthesis
Short decaying noise + tone bursts, one timbre per variation index
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from popit.core.constants import (
    SAMPLE_RATE, POP_DURATION,
    DECAY_RATE_BASE, DECAY_RATE_STEP, TONE_FREQ_BASE, TONE_FREQ_STEP,
    NOISE_MIX_BASE, NOISE_MIX_STEP, TONE_MIX_BASE, TONE_MIX_STEP,
    CLICK_SAMPLES, CLICK_LEVEL, MAX_SAMPLE, MIN_SAMPLE
)
from popit.audio.errors import InvalidInput


@dataclass(frozen=True)
class SynthParams:
    """Timbre parameters for one pop variation."""
    decay_rate: float
    tone_freq: float
    noise_mix: float
    tone_mix: float

    @classmethod
    def for_variation(cls, variation: int) -> 'SynthParams':
        """
        Build the parameters for a variation index.
        
        Parameters scale linearly and without bound. Variations 0..3 keep
        the pop in a pleasant range; higher indices are accepted but get
        progressively more tonal and higher pitched.
        """
        if variation < 0:
            raise InvalidInput(f"Variation must be non-negative, got {variation}")
        return cls(
            decay_rate=DECAY_RATE_BASE + DECAY_RATE_STEP * variation,
            tone_freq=TONE_FREQ_BASE + TONE_FREQ_STEP * variation,
            noise_mix=NOISE_MIX_BASE + NOISE_MIX_STEP * variation,
            tone_mix=TONE_MIX_BASE + TONE_MIX_STEP * variation,
        )


def synth_params(variation: int) -> SynthParams:
    return SynthParams.for_variation(variation)


class PopSynthesizer:
    """Generates mono 16-bit pop sounds."""
    
    def __init__(self, sample_rate: int = SAMPLE_RATE, duration: float = POP_DURATION,
                 seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        """
        Args:
            sample_rate: Output rate in Hz
            duration: Pop length in seconds
            seed: Seed for the noise generator (ignored if rng is given)
            rng: Explicit noise generator
        """
        if sample_rate <= 0:
            raise InvalidInput(f"Sample rate must be positive, got {sample_rate}")
        if duration < 0:
            raise InvalidInput(f"Duration must be non-negative, got {duration}")
        self.sample_rate = int(sample_rate)
        self.duration = duration
        self.num_samples = int(self.sample_rate * duration)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
    
    def _time_axis(self):
        index = np.arange(self.num_samples, dtype=np.float64)
        return index, index / self.sample_rate
    
    def deterministic_component(self, variation: int) -> np.ndarray:
        """Tone + click contribution of a variation, before scaling to 16-bit."""
        params = SynthParams.for_variation(variation)
        index, t = self._time_axis()
        envelope = np.exp(-t * params.decay_rate)
        
        tone = np.sin(2.0 * np.pi * params.tone_freq * t) * params.tone_mix * envelope
        
        click = np.zeros(self.num_samples, dtype=np.float64)
        n_click = min(CLICK_SAMPLES, self.num_samples)
        click[:n_click] = (1.0 - index[:n_click] / CLICK_SAMPLES) * CLICK_LEVEL
        
        return tone + click
    
    def synthesize(self, variation: int) -> np.ndarray:
        """
        Generate one pop.
        
        Returns:
            int16 array of exactly num_samples samples in [-32767, 32767]
        """
        params = SynthParams.for_variation(variation)
        _, t = self._time_axis()
        envelope = np.exp(-t * params.decay_rate)
        
        # White noise burst, fresh draw per sample
        noise = self.rng.uniform(-1.0, 1.0, self.num_samples) * params.noise_mix * envelope
        
        raw = noise + self.deterministic_component(variation)
        
        # Clamp only after scaling to integers
        pcm = np.clip(np.rint(raw * MAX_SAMPLE), MIN_SAMPLE, MAX_SAMPLE)
        return pcm.astype(np.int16)


def synthesize(variation: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Generate one pop at the default rate and duration."""
    return PopSynthesizer(rng=rng).synthesize(variation)
