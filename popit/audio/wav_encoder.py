"""
Pop It Bubble - WAV Container Encoder
Wraps mono 16-bit PCM in a canonical 44-byte RIFF/WAVE header
"""

import numbers
import struct

import numpy as np

from popit.core.constants import NUM_CHANNELS, BITS_PER_SAMPLE, WAV_FORMAT_PCM, WAV_HEADER_SIZE
from popit.audio.errors import InvalidInput

HEADER_SIZE = WAV_HEADER_SIZE

# RIFF chunk, fmt subchunk, data subchunk header
_HEADER = struct.Struct('<4sI4s4sIHHIIHH4sI')
_FMT_CHUNK_SIZE = 16
_MAX_U32 = 0xFFFFFFFF


def _validate_rate(sample_rate):
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, numbers.Integral):
        raise InvalidInput(f"Sample rate must be an integer, got {sample_rate!r}")
    if sample_rate <= 0:
        raise InvalidInput(f"Sample rate must be positive, got {sample_rate}")


def _as_samples(pcm) -> np.ndarray:
    samples = np.asarray(pcm)
    if samples.size == 0:
        return np.zeros(0, dtype=np.int16)
    if samples.ndim != 1:
        raise InvalidInput(f"Expected mono PCM (1-D), got shape {samples.shape}")
    if samples.dtype.kind not in 'iu':
        raise InvalidInput(f"Expected integer samples, got dtype {samples.dtype}")
    return samples


def encode(pcm, sample_rate: int) -> bytes:
    """
    Serialize PCM samples into WAV bytes.
    
    Args:
        pcm: Sequence or array of signed 16-bit samples (may be empty)
        sample_rate: Rate in Hz, must be positive
    
    Returns:
        44-byte header followed by little-endian sample data
    """
    _validate_rate(sample_rate)
    sample_rate = int(sample_rate)
    samples = _as_samples(pcm)
    
    block_align = NUM_CHANNELS * BITS_PER_SAMPLE // 8
    byte_rate = sample_rate * block_align
    data_size = samples.size * block_align
    if byte_rate > _MAX_U32:
        raise InvalidInput(f"Sample rate {sample_rate} too large for a WAV header")
    if 36 + data_size > _MAX_U32:
        raise InvalidInput(f"PCM data too large for a WAV container ({data_size} bytes)")
    if data_size and (samples.min() < -32768 or samples.max() > 32767):
        raise InvalidInput("Samples out of 16-bit range")
    data = samples.astype('<i2').tobytes()
    
    header = _HEADER.pack(
        b'RIFF', 36 + data_size, b'WAVE',
        b'fmt ', _FMT_CHUNK_SIZE, WAV_FORMAT_PCM, NUM_CHANNELS,
        sample_rate, byte_rate, block_align, BITS_PER_SAMPLE,
        b'data', data_size
    )
    return header + data
