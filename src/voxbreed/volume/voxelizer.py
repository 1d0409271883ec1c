"""
Voxelizer Module

This module samples the density field of a genome over a 3D grid and cleans
it up for surface extraction:
    voxelize -> morph_open -> keep_largest_component
The result, a single connected and denoised scalar field together with the
iso-level separating solid from empty voxels, is what an external mesher
(e.g. marching cubes) receives.

Voxel data is a flat float64 array of length resolution**3, with x varying
fastest, then y, then z: voxel (ix, iy, iz) is at index (iz * res + iy) * res + ix.
Viewed as a 3D array (VoxelGrid.volume) its axes are therefore (z, y, x).

Classes:
    VoxelGrid:    Flat scalar field plus resolution
    MeshingInput: What the mesher receives (grid and iso-level)

Functions:
    voxelize:                Sample a genome over the grid
    morph_open:              Grayscale erosion then dilation over 6-neighbourhoods
    keep_largest_component:  Keep the largest 6-connected solid region
    count_surface_crossings: Number of grid cells the iso-surface passes through
    prepare_for_meshing:     The complete export pipeline
"""

from dataclasses import dataclass
from typing      import NamedTuple, TYPE_CHECKING

import numpy as np
from loguru import logger
from scipy  import ndimage

from voxbreed.phenotype import NetworkFast

if TYPE_CHECKING:
    from voxbreed.genotype import Genome

DEFAULT_ISO_LEVEL = 0.3

# Self plus the 6 face neighbours
_CROSS = ndimage.generate_binary_structure(3, 1)

@dataclass
class VoxelGrid:
    """
    A cubic scalar field sampled on resolution**3 voxels (x fastest).

    Raises:
        ValueError: if the length of 'data' is not resolution**3
    """
    data      : np.ndarray
    resolution: int

    def __post_init__(self):
        self.data = np.asarray(self.data, dtype=np.float64).ravel()
        if self.resolution < 1:
            raise ValueError(f"Grid resolution must be positive, got {self.resolution}")
        if self.data.size != self.resolution ** 3:
            raise ValueError(f"Grid of resolution {self.resolution} needs {self.resolution ** 3} "
                             f"values, got {self.data.size}")

    @classmethod
    def from_volume(cls, volume: np.ndarray) -> 'VoxelGrid':
        """Build a grid from a cubic 3D array indexed [z, y, x]."""
        volume = np.asarray(volume, dtype=np.float64)
        if volume.ndim != 3 or len(set(volume.shape)) != 1:
            raise ValueError(f"Volume must be a cube, got shape {volume.shape}")
        return cls(volume.ravel(), volume.shape[0])

    @property
    def volume(self) -> np.ndarray:
        """View of the data as a 3D array indexed [z, y, x]."""
        res = self.resolution
        return self.data.reshape(res, res, res)

    def solid_count(self, iso_level: float = DEFAULT_ISO_LEVEL) -> int:
        """Number of voxels at or above the iso-level."""
        return int(np.count_nonzero(self.data >= iso_level))

class MeshingInput(NamedTuple):
    grid     : VoxelGrid
    iso_level: float

def voxelize(genome: 'Genome', resolution: int, envelope_radius: float = 0.9) -> VoxelGrid:
    """
    Evaluate the density output of a genome at every voxel of a
    resolution x resolution x resolution grid spanning [-1, 1] on each axis.

    The density is multiplied by the spherical envelope max(0, 1 - d / envelope_radius)
    (d: distance from the origin), so it fades out towards the grid corners.

    Parameters:
        genome:          The genome to sample
        resolution:      Voxels per axis (at least 2)
        envelope_radius: Distance at which the envelope reaches 0

    Returns:
        The sampled grid
    """
    if resolution < 2:
        raise ValueError(f"Voxel resolution must be at least 2, got {resolution}")

    coords = -1.0 + np.arange(resolution) * (2.0 / (resolution - 1))
    zs, ys, xs = np.meshgrid(coords, coords, coords, indexing='ij')

    density  = NetworkFast(genome).forward_pass(xs, ys, zs).density
    dist     = np.sqrt(xs * xs + ys * ys + zs * zs)
    envelope = np.maximum(0.0, 1.0 - dist / envelope_radius)

    return VoxelGrid((density * envelope).ravel(), resolution)

def morph_open(grid: VoxelGrid) -> VoxelGrid:
    """
    Morphological opening: erosion (minimum over each voxel and its in-grid face
    neighbours) followed by dilation (maximum over the same neighbourhood).
    Removes isolated voxels and thin spurs. Applying it twice gives the same
    result as applying it once.
    """
    # 'nearest' repeats the border voxel, which leaves min/max over in-grid neighbours unchanged
    eroded = ndimage.grey_erosion(grid.volume, footprint=_CROSS, mode='nearest')
    opened = ndimage.grey_dilation(eroded, footprint=_CROSS, mode='nearest')
    return VoxelGrid(opened.ravel(), grid.resolution)

def keep_largest_component(grid: VoxelGrid, iso_level: float = DEFAULT_ISO_LEVEL) -> VoxelGrid:
    """
    Keep only the largest 6-connected region of solid voxels (value >= iso_level).

    Voxels of the largest region keep their values; every other voxel is set to
    iso_level - 1. When several regions share the largest size, the one reached
    first in storage order wins. A grid without solid voxels is returned unchanged.
    """
    labels, num_components = ndimage.label(grid.volume >= iso_level, structure=_CROSS)
    if num_components == 0:
        return VoxelGrid(grid.data.copy(), grid.resolution)

    sizes   = np.bincount(labels.ravel())
    largest = 1 + int(np.argmax(sizes[1:]))

    data = np.where(labels.ravel() == largest, grid.data, iso_level - 1.0)
    if num_components > 1:
        logger.debug("[Voxelizer] Kept component of {} voxels, dropped {} smaller components",
                     sizes[largest], num_components - 1)
    return VoxelGrid(data, grid.resolution)

def count_surface_crossings(grid: VoxelGrid, iso_level: float = DEFAULT_ISO_LEVEL) -> int:
    """
    Count the grid cells (cubes of 8 neighbouring voxels) whose corners are
    partly solid and partly empty: the cells a marching cubes mesher would
    place triangles in. Zero means the mesh would be empty.
    """
    solid = grid.volume >= iso_level
    corners = [solid[dz:dz + grid.resolution - 1, dy:dy + grid.resolution - 1, dx:dx + grid.resolution - 1]
               for dz in (0, 1) for dy in (0, 1) for dx in (0, 1)]
    all_solid = np.logical_and.reduce(corners)
    any_solid = np.logical_or.reduce(corners)
    return int(np.count_nonzero(any_solid & ~all_solid))

def prepare_for_meshing(genome         : 'Genome',
                        resolution     : int   = 50,
                        iso_level      : float = DEFAULT_ISO_LEVEL,
                        envelope_radius: float = 0.9) -> MeshingInput:
    """
    Run the export pipeline: voxelize, open, keep the largest component.

    Returns:
        The cleaned grid and the iso-level the mesher must use
    """
    grid = voxelize(genome, resolution, envelope_radius)
    grid = morph_open(grid)
    grid = keep_largest_component(grid, iso_level)

    solid = grid.solid_count(iso_level)
    if solid == 0:
        logger.warning("[Voxelizer] Genome {} exports an empty volume (no voxel reaches {})", genome.id, iso_level)
    else:
        logger.info("[Voxelizer] Genome {} exported at resolution {}: {} solid voxels, {} surface cells",
                    genome.id, resolution, solid, count_surface_crossings(grid, iso_level))

    return MeshingInput(grid, iso_level)
