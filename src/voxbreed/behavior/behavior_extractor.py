"""
Behavior Extractor Module

This module turns a genome into a behavior descriptor: a fixed-length
summary of the 2D pattern the genome renders on the z = 0 plane. Novelty
search measures how different two genomes are by the Euclidean distance
between their descriptors.

The pattern is sampled on a square grid covering [-1, 1] x [-1, 1]; sample
(xi, yi) sits at x = xi / (resolution - 1) * 2 - 1 (likewise for y). The
descriptor holds, in this order once flattened (22 values):
    - 8-bin hue histogram, normalized to sum to 1
    - horizontal, vertical and radial symmetry scores
    - 4 frequency bands: fractions of horizontally adjacent sample pairs whose
      color difference falls below 0.25, 0.5, 0.75, or above; they sum to 1
    - 4 radial density rings: mean brightness per distance band from the center
    - average red, green and blue

Classes:
    Symmetry, AverageColor: Components of the descriptor
    BehaviorDescriptor:     The descriptor

Functions:
    extract_behavior:   Sample a genome and compute its descriptor
    behavior_to_vector: Flatten a descriptor into 22 values
    behavior_distance:  Euclidean distance between two descriptors
    rgb_to_hue:         Hue of a color, in [0, 1)
"""

import math
from dataclasses import dataclass
from typing      import NamedTuple, TYPE_CHECKING

import numpy as np

from voxbreed.phenotype import NetworkFast

if TYPE_CHECKING:
    from voxbreed.genotype import Genome

HUE_BINS        = 8
FREQUENCY_EDGES = (0.25, 0.5, 0.75)
RADIAL_RINGS    = 4
BEHAVIOR_SIZE   = HUE_BINS + 3 + len(FREQUENCY_EDGES) + 1 + RADIAL_RINGS + 3   # 22

# Largest color difference between two pixels (sum over the 3 channels)
MAX_COLOR_DIFF = 3.0

class Symmetry(NamedTuple):
    horizontal: float
    vertical  : float
    radial    : float

class AverageColor(NamedTuple):
    r: float
    g: float
    b: float

@dataclass(frozen=True)
class BehaviorDescriptor:
    """
    Summary of the pattern rendered by a genome.

    Attributes:
        hue_histogram:   8 fractions of pixels per hue bin (sum to 1)
        symmetry:        mirror symmetry scores (1 = symmetric); radial is floored at 0
        frequency_bands: 4 fractions of adjacent pixel pairs per difference band (sum to 1)
        radial_density:  4 mean brightness values, from the center outwards
        average_color:   mean red, green and blue
    """
    hue_histogram  : tuple[float, ...]
    symmetry       : Symmetry
    frequency_bands: tuple[float, ...]
    radial_density : tuple[float, ...]
    average_color  : AverageColor

def rgb_to_hue(r: float, g: float, b: float) -> float:
    """
    Compute the hue of an RGB color as a fraction of a full turn, in [0, 1).
    Grays (all channels equal) have hue 0.
    """
    max_c = max(r, g, b)
    delta = max_c - min(r, g, b)
    if delta == 0:
        return 0.0

    if max_c == r:
        h = math.fmod((g - b) / delta, 6)
    elif max_c == g:
        h = (b - r) / delta + 2
    else:
        h = (r - g) / delta + 4

    h /= 6
    if h < 0:
        h += 1
    return h

def _hue_array(r: np.ndarray, g: np.ndarray, b: np.ndarray) -> np.ndarray:
    # Vectorized rgb_to_hue
    max_c = np.maximum(np.maximum(r, g), b)
    delta = max_c - np.minimum(np.minimum(r, g), b)
    safe  = np.where(delta == 0, 1.0, delta)

    hue = np.where(max_c == r, np.fmod((g - b) / safe, 6),
          np.where(max_c == g, (b - r) / safe + 2,
                               (r - g) / safe + 4)) / 6
    hue = np.where(hue < 0, hue + 1, hue)
    return np.where(delta == 0, 0.0, hue)

def _radial_symmetry(colors: np.ndarray, resolution: int) -> float:
    """
    Compare pixels of the top-left quadrant with the pixels at the same distance
    from the center in the 4 axis directions.
    """
    mid    = resolution // 2
    center = resolution / 2 - 0.5
    angles = (0.0, math.pi / 2, math.pi, 3 * math.pi / 2)

    radial_diff = 0.0
    for yi in range(mid):
        for xi in range(mid):
            dist = math.hypot(xi - center, yi - center)

            pixels = []
            for angle in angles:
                nxi = _round_half_up(center + dist * math.cos(angle))
                nyi = _round_half_up(center + dist * math.sin(angle))
                if 0 <= nxi < resolution and 0 <= nyi < resolution:
                    pixels.append(colors[nyi, nxi])

            if len(pixels) >= 2:
                for pixel in pixels[1:]:
                    radial_diff += float(np.abs(pixels[0] - pixel).sum())

    return max(0.0, 1.0 - radial_diff / (mid * mid * 3 * MAX_COLOR_DIFF))

def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)

def extract_behavior(genome: 'Genome', resolution: int = 16) -> BehaviorDescriptor:
    """
    Sample the pattern of a genome on a resolution x resolution grid (z = 0)
    and compute its behavior descriptor.

    Parameters:
        genome:     The genome to characterize
        resolution: Samples per side of the grid

    Returns:
        The behavior descriptor of the genome

    Raises:
        ValueError: if resolution is below 2
    """
    if resolution < 2:
        raise ValueError(f"Behavior resolution must be at least 2, got {resolution}")

    coords = np.arange(resolution) / (resolution - 1) * 2 - 1
    ys, xs = np.meshgrid(coords, coords, indexing='ij')   # [yi, xi]
    output = NetworkFast(genome).forward_pass(xs, ys, np.zeros_like(xs))
    colors = np.stack([output.r, output.g, output.b], axis=-1)
    total  = resolution * resolution

    # Hue histogram
    hue  = _hue_array(output.r, output.g, output.b)
    bins = np.minimum(HUE_BINS - 1, np.floor(hue * HUE_BINS).astype(np.int64))
    hue_histogram = np.bincount(bins.ravel(), minlength=HUE_BINS) / total

    # Mirror symmetry: left half against right half, top half against bottom half
    mid   = resolution // 2
    count = resolution * mid
    horizontal_diff = np.abs(colors[:, :mid] - colors[:, ::-1][:, :mid]).sum()
    vertical_diff   = np.abs(colors[:mid, :] - colors[::-1][:mid, :]).sum()
    symmetry = Symmetry(horizontal = float(1 - horizontal_diff / (count * MAX_COLOR_DIFF)),
                        vertical   = float(1 - vertical_diff   / (count * MAX_COLOR_DIFF)),
                        radial     = _radial_symmetry(colors, resolution))

    # Frequency bands, from the differences between horizontal neighbours
    neighbour_diff  = np.abs(colors[:, :-1] - colors[:, 1:]).sum(axis=-1)
    bands           = np.digitize(neighbour_diff, FREQUENCY_EDGES)
    frequency_bands = np.bincount(bands.ravel(), minlength=len(FREQUENCY_EDGES) + 1) / neighbour_diff.size

    # Radial density rings, distance normalized by the corner distance sqrt(2)
    dist       = np.sqrt(xs * xs + ys * ys)
    rings      = np.minimum(RADIAL_RINGS - 1, np.floor(dist / math.sqrt(2) * RADIAL_RINGS).astype(np.int64))
    brightness = colors.mean(axis=-1)
    ring_sum   = np.bincount(rings.ravel(), weights=brightness.ravel(), minlength=RADIAL_RINGS)
    ring_count = np.bincount(rings.ravel(), minlength=RADIAL_RINGS)
    radial_density = [float(s / c) if c > 0 else 0.0 for s, c in zip(ring_sum, ring_count)]

    average = colors.reshape(-1, 3).mean(axis=0)

    return BehaviorDescriptor(hue_histogram   = tuple(float(v) for v in hue_histogram),
                              symmetry        = symmetry,
                              frequency_bands = tuple(float(v) for v in frequency_bands),
                              radial_density  = tuple(radial_density),
                              average_color   = AverageColor(*(float(v) for v in average)))

def behavior_to_vector(behavior: BehaviorDescriptor) -> np.ndarray:
    """
    Flatten a behavior descriptor into its 22 values:
    hue histogram (8), symmetry (3), frequency bands (4), radial density (4), average color (3).
    """
    return np.array([*behavior.hue_histogram,
                     *behavior.symmetry,
                     *behavior.frequency_bands,
                     *behavior.radial_density,
                     *behavior.average_color], dtype=np.float64)

def behavior_distance(a: BehaviorDescriptor, b: BehaviorDescriptor) -> float:
    """Euclidean distance between two behavior descriptors."""
    return float(np.linalg.norm(behavior_to_vector(a) - behavior_to_vector(b)))
