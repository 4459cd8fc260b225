"""
Music helpers for the generative note nodes.

Scales are lists of semitone offsets from a root note. The random helpers are
seedable and integer-exact so that a generator seeded with the same value
plays the same notes on every machine.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")

Rng = Callable[[], float]

_U32 = 0xFFFFFFFF


class ScaleMode(str, Enum):
    MAJOR = "MAJOR"
    MINOR = "MINOR"


# Semitone offsets of the major and minor pentatonic intervals.
MAJOR_PENTATONIC = (0, 2, 4, 7, 9)
MINOR_PENTATONIC = (0, 3, 5, 7, 10)

# Root note numbers, as stored in projects. An ``s`` suffix is a sharp.
MIDI_NOTES = {
    "C": 0,
    "Cs": 1,
    "D": 2,
    "Ds": 3,
    "E": 4,
    "Es": 5,
    "F": 6,
    "Fs": 7,
    "G": 8,
    "Gs": 9,
    "A": 10,
    "As": 11,
    "B": 12,
}


def scale_for(mode: ScaleMode | str) -> tuple[int, ...]:
    return MAJOR_PENTATONIC if ScaleMode(mode) == ScaleMode.MAJOR else MINOR_PENTATONIC


def get_harmony(
    intervals: Sequence[int],
    root_note: int,
    octave: int,
    pitch_range: int,
) -> list[int]:
    """The first ``pitch_range`` pitches of a scale, ascending across octaves.

    Args:
        intervals: Semitone offsets from the root note.
        root_note: MIDI number of the root, no greater than 12.
        octave: Octave to transpose the whole scale by.
        pitch_range: How many pitches to return.
    """
    if not intervals or pitch_range <= 0:
        return []

    base = [i + root_note + octave * 12 for i in intervals]
    chunks = max(1, math.ceil(pitch_range / len(intervals)))

    pitches = [p + chunk * 12 for chunk in range(chunks) for p in base]
    return pitches[:pitch_range]


# =============================================================================
# Deterministic randomness
# =============================================================================

def _int32(x: int) -> int:
    x &= _U32
    return x - (1 << 32) if x & 0x80000000 else x


def hashify(x: int) -> int:
    """Bob Jenkins' one-at-a-time mixing step, with 32-bit shift semantics."""
    x = x + _int32(_int32(x) << 10)
    x = _int32(x) ^ (_int32(x) >> 6)
    x = x + _int32(x << 3)
    x = _int32(x) ^ (_int32(x) >> 11)
    x = x + _int32(_int32(x) << 15)
    return x


def seed_rng(seed: int) -> Rng:
    """SplitMix32 generator returning floats in ``[0, 1)``."""
    state = int(seed) & _U32

    def rng() -> float:
        nonlocal state
        state = (state + 0x9E3779B9) & _U32
        t = state ^ (state >> 16)
        t = (t * 0x21F0AAAD) & _U32
        t ^= t >> 15
        t = (t * 0x735A2D97) & _U32
        t ^= t >> 15
        return t / 4294967296

    return rng


def rand_int(low: int, high: int, rng: Rng) -> int:
    """Random integer in ``[low, high]``, both inclusive."""
    low = math.ceil(low)
    high = math.floor(high)
    return math.floor(rng() * (high - low + 1)) + low


def pick_random(items: Sequence[T], n: int, rng: Rng) -> list[T]:
    """Pick ``n`` distinct elements with a partial Fisher-Yates shuffle."""
    if n < 0 or n > len(items):
        raise ValueError(f"Cannot pick {n} elements from a sequence of length {len(items)}")

    result = list(items)
    for i in range(n):
        j = i + math.floor(rng() * (len(items) - i))
        result[i], result[j] = result[j], result[i]
    return result[:n]
