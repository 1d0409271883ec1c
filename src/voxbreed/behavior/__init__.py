from voxbreed.behavior.behavior_extractor import (
    BEHAVIOR_SIZE,
    BehaviorDescriptor,
    Symmetry,
    AverageColor,
    extract_behavior,
    behavior_to_vector,
    behavior_distance,
    rgb_to_hue
)

__all__ = [
    'BEHAVIOR_SIZE',
    'BehaviorDescriptor',
    'Symmetry',
    'AverageColor',
    'extract_behavior',
    'behavior_to_vector',
    'behavior_distance',
    'rgb_to_hue'
]
