from voxbreed.novelty.archive import ArchiveEntry, NoveltyArchive
from voxbreed.novelty.search  import evaluate_novelty, select_by_novelty, explore_novelty

__all__ = [
    'ArchiveEntry',
    'NoveltyArchive',
    'evaluate_novelty',
    'select_by_novelty',
    'explore_novelty'
]
