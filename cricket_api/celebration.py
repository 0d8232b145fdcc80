# cricket_api/celebration.py
from __future__ import annotations

import io
import logging
import math
import struct
import wave
from typing import Callable, List, Tuple

from cricket_api.config import CELEBRATION_ENABLED, CELEBRATION_SAMPLE_RATE

logger = logging.getLogger(__name__)

# (frequency Hz, start offset s, duration s): a rising arpeggio ending on a held high C
CELEBRATION_MELODY: Tuple[Tuple[float, float, float], ...] = (
    (523.25, 0.0, 0.12),
    (659.25, 0.1, 0.12),
    (783.99, 0.2, 0.12),
    (1046.5, 0.3, 0.25),
    (783.99, 0.5, 0.1),
    (1046.5, 0.58, 0.35),
)

PEAK_GAIN = 0.2
ATTACK_SEC = 0.02
DECAY_FLOOR = 0.001
TAIL_SEC = 0.01


class SideEffectFailure(Exception):
    """Raised when the boundary tone cannot be rendered or delivered."""
    pass


def _triangle(phase: float) -> float:
    # phase in cycles; output in [-1, 1]
    frac = phase - math.floor(phase)
    return 4.0 * abs(frac - 0.5) - 1.0


def _envelope(t: float, dur: float) -> float:
    """Linear attack to PEAK_GAIN, then exponential decay to DECAY_FLOOR at `dur`."""
    if t < 0 or t > dur:
        return 0.0
    if t < ATTACK_SEC:
        return PEAK_GAIN * (t / ATTACK_SEC)
    span = max(dur - ATTACK_SEC, 1e-6)
    return PEAK_GAIN * (DECAY_FLOOR / PEAK_GAIN) ** ((t - ATTACK_SEC) / span)


def render_samples(sample_rate: int = CELEBRATION_SAMPLE_RATE) -> List[float]:
    total_sec = max(start + dur for _, start, dur in CELEBRATION_MELODY) + TAIL_SEC
    samples = [0.0] * int(math.ceil(total_sec * sample_rate))

    for freq, start, dur in CELEBRATION_MELODY:
        first = int(start * sample_rate)
        count = int(dur * sample_rate)
        for i in range(count):
            t = i / float(sample_rate)
            idx = first + i
            if idx >= len(samples):
                break
            samples[idx] += _envelope(t, dur) * _triangle(freq * t)

    return samples


def render_celebration_wav(sample_rate: int = CELEBRATION_SAMPLE_RATE) -> bytes:
    """16-bit mono WAV of the melody."""
    if sample_rate <= 0:
        raise SideEffectFailure(f"Invalid sample rate: {sample_rate}")

    try:
        frames = b"".join(
            struct.pack("<h", int(max(-1.0, min(1.0, s)) * 32767))
            for s in render_samples(sample_rate)
        )
        buf = io.BytesIO()
        with wave.open(buf, "wb") as w:
            w.setnchannels(1)
            w.setsampwidth(2)
            w.setframerate(sample_rate)
            w.writeframes(frames)
        return buf.getvalue()
    except (wave.Error, struct.error) as e:
        raise SideEffectFailure(f"Could not render celebration tone: {e}") from e


def play_celebration(sink: Callable[[bytes], None], sample_rate: int = CELEBRATION_SAMPLE_RATE) -> bool:
    """
    Fire-and-forget: render the tone and hand it to `sink`.

    Never raises; any failure is logged and reported as False.
    """
    if not CELEBRATION_ENABLED:
        return False

    try:
        sink(render_celebration_wav(sample_rate))
        return True
    except SideEffectFailure as e:
        logger.warning("Celebration tone skipped: %s", e)
    except Exception as e:
        logger.warning("Celebration output unavailable: %s", e)
    return False
