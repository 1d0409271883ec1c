class VoxbreedError(Exception):
    """Base for all voxbreed exceptions."""

    pass


class MalformedGenome(VoxbreedError, ValueError):
    """
    A genome payload that cannot describe a valid CPPN.

    Raised at construction and decode boundaries (dangling node references,
    duplicate node or innovation ids, edges into input nodes, self-loops,
    cycles). Malformed genomes are never repaired silently.
    """

    pass
