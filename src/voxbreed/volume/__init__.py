from voxbreed.volume.voxelizer import (
    DEFAULT_ISO_LEVEL,
    VoxelGrid,
    MeshingInput,
    voxelize,
    morph_open,
    keep_largest_component,
    count_surface_crossings,
    prepare_for_meshing
)

__all__ = [
    'DEFAULT_ISO_LEVEL',
    'VoxelGrid',
    'MeshingInput',
    'voxelize',
    'morph_open',
    'keep_largest_component',
    'count_surface_crossings',
    'prepare_for_meshing'
]
