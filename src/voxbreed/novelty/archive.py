"""
Novelty Archive Module

This module implements the archive of novelty search: a bounded,
first-in first-out record of the behaviors found novel so far. The
sparseness of a behavior (its mean distance to the k nearest archived or
contemporary behaviors) is its novelty score.

Classes:
    ArchiveEntry:   An archived behavior
    NoveltyArchive: The bounded archive
"""

from collections import deque
from dataclasses import dataclass
from typing      import Iterable

import math
import numpy as np
from loguru import logger

from voxbreed.behavior import BehaviorDescriptor, behavior_to_vector

@dataclass(frozen=True)
class ArchiveEntry:
    behavior       : BehaviorDescriptor
    genome_id      : str
    insertion_order: int

class NoveltyArchive:
    """
    Bounded archive of novel behaviors.

    A behavior is admitted when its sparseness exceeds 'threshold'; once the
    archive holds more than 'max_size' entries, the oldest one is evicted.

    Public Properties:
        size:    Number of archived entries
        entries: The archived entries, oldest first (read only)

    Public Methods:
        calculate_sparseness(behavior, population): Novelty score of a behavior
        maybe_add(behavior, genome_id, population): Score a behavior, archive it if novel enough
        clear():                                    Remove all entries
    """

    def __init__(self, k: int = 15, threshold: float = 0.3, max_size: int = 500):
        if k < 1:
            raise ValueError(f"'k' must be at least 1, got {k}")
        if max_size < 1:
            raise ValueError(f"'max_size' must be at least 1, got {max_size}")

        self.k         = k
        self.threshold = threshold
        self.max_size  = max_size

        self._entries: deque[ArchiveEntry] = deque()
        self._vectors: deque[np.ndarray]   = deque()   # flattened behaviors, parallel to _entries
        self._next_insertion = 0

    @classmethod
    def from_config(cls, config) -> 'NoveltyArchive':
        return cls(k         = config.novelty_k,
                   threshold = config.novelty_threshold,
                   max_size  = config.archive_max_size)

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[ArchiveEntry, ...]:
        return tuple(self._entries)

    def calculate_sparseness(self,
                             behavior  : BehaviorDescriptor,
                             population: Iterable[BehaviorDescriptor] = ()) -> float:
        """
        Compute the sparseness of a behavior: the mean Euclidean distance to its
        k nearest neighbours among the archived behaviors and 'population'.

        Parameters:
            behavior:   The behavior to score
            population: Behaviors of the current generation (may include 'behavior' itself)

        Returns:
            The sparseness (math.inf if there is nothing to compare against)
        """
        pool = list(self._vectors) + [behavior_to_vector(other) for other in population]
        if not pool:
            return math.inf

        distances = np.sort(np.linalg.norm(np.stack(pool) - behavior_to_vector(behavior), axis=1))
        effective_k = min(self.k, len(distances))
        return float(distances[:effective_k].mean())

    def maybe_add(self,
                  behavior  : BehaviorDescriptor,
                  genome_id : str,
                  population: Iterable[BehaviorDescriptor] = ()) -> tuple[bool, float]:
        """
        Score a behavior and archive it if its sparseness exceeds the threshold.

        Returns:
            (whether the behavior was archived, its sparseness)
        """
        sparseness = self.calculate_sparseness(behavior, population)
        if not sparseness > self.threshold:
            return False, sparseness

        self._entries.append(ArchiveEntry(behavior, genome_id, self._next_insertion))
        self._vectors.append(behavior_to_vector(behavior))
        self._next_insertion += 1

        if len(self._entries) > self.max_size:
            evicted = self._entries.popleft()
            self._vectors.popleft()
            logger.debug("[Archive] Evicted entry {} of genome {}", evicted.insertion_order, evicted.genome_id)

        logger.debug("[Archive] Admitted genome {} (sparseness {:.3f}, size {})", genome_id, sparseness, self.size)
        return True, sparseness

    def clear(self) -> None:
        self._entries.clear()
        self._vectors.clear()

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return f"NoveltyArchive(k={self.k}, threshold={self.threshold}, max_size={self.max_size}, size={self.size})"
