"""
Genome sharing codec.

A shared genome travels as text: the base64 encoding of the JSON object
{"n": [node, ...], "c": [connection, ...]}, where nodes and connections use
the same field names as Genome.to_dict(). Identity and fitness are not part
of the payload; a decoded genome always gets a fresh identity.
"""

import base64
import binascii
import json

from loguru import logger

from voxbreed.exceptions      import MalformedGenome
from voxbreed.genotype.genome import Genome

def encode_genome(genome: Genome) -> str:
    """
    Encode a genome as a base64 string, suitable for share links.
    """
    genome_dict = genome.to_dict()
    payload     = {"n": genome_dict["nodes"], "c": genome_dict["connections"]}
    text        = json.dumps(payload, separators=(",", ":"))
    return base64.b64encode(text.encode("utf-8")).decode("ascii")

def decode_genome(encoded: str) -> Genome:
    """
    Decode a genome previously produced by encode_genome().

    Raises:
        MalformedGenome: if the text is not valid base64/JSON, or the payload
                         does not describe a well formed genome
    """
    try:
        text    = base64.b64decode(encoded, validate=True).decode("utf-8")
        payload = json.loads(text)
    except (binascii.Error, UnicodeDecodeError, ValueError, TypeError) as e:
        logger.warning("[Genome] Rejected undecodable genome payload: {}", e)
        raise MalformedGenome(f"Genome payload is not base64 encoded JSON: {e}") from e

    if not isinstance(payload, dict) or "n" not in payload or "c" not in payload:
        raise MalformedGenome("Genome payload must be an object with 'n' and 'c' members")

    return Genome.from_dict({"nodes": payload["n"], "connections": payload["c"]})
