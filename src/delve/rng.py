from __future__ import annotations

import hashlib
import json
import logging
import random
import secrets
from dataclasses import dataclass
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, bytes, None]


def _to_stable_json(value: Any) -> str:
    """Stable JSON encoding for hashing.

    Keeps key ordering and separators fixed so derived seeds do not drift
    between runs or interpreter versions.
    """
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class RNGManager:
    """Deterministic RNG derivation from one master seed.

    Each consumer asks for a context-specific ``random.Random`` so results do
    not depend on call ordering:

        rngm = RNGManager(seed)
        carve_rng = rngm.context_rng("level_layout", generation, level, attempt)

    The master seed may be an int, str or bytes; None draws a random one
    (logged so a run can be reproduced).
    """

    master_seed: Seed

    def __post_init__(self) -> None:
        object.__setattr__(self, "_master_seed_bytes", self._canonicalize_seed(self.master_seed))
        if self.master_seed is None:
            rand = secrets.token_bytes(16)
            object.__setattr__(self, "_master_seed_bytes", rand)
            logger.info("No master seed provided; generated random seed: %s", rand.hex())
        else:
            logger.debug("Using master seed: %r", self.master_seed)

    @staticmethod
    def _canonicalize_seed(seed: Optional[Union[int, str, bytes]]) -> bytes:
        if seed is None:
            return b""
        if isinstance(seed, bytes):
            return seed
        if isinstance(seed, int):
            if seed < 0:
                raise ValueError(f"Seed must be non-negative, got {seed}")
            length = (seed.bit_length() + 7) // 8 or 1
            return seed.to_bytes(length, "big", signed=False)
        if isinstance(seed, str):
            s = seed.strip()
            if s.startswith("0x"):
                try:
                    val = int(s, 16)
                    length = (val.bit_length() + 7) // 8 or 1
                    return val.to_bytes(length, "big", signed=False)
                except ValueError:
                    return s.encode("utf-8")
            return s.encode("utf-8")
        raise TypeError("Unsupported seed type: %r" % (type(seed),))

    def derive_seed(self, domain: str, *identifiers: Any) -> int:
        """64-bit seed from the master seed, a domain name and identifiers.

        The engine derives carving RNGs under the "level_layout" domain.
        """
        payload = {
            "domain": domain,
            "ids": identifiers,
            "master": self._master_seed_bytes.hex(),
            "algo": "blake2b-64",
            "version": 1,
        }
        data = _to_stable_json(payload).encode("utf-8")
        h = hashlib.blake2b(data, digest_size=8)
        return int.from_bytes(h.digest(), "big", signed=False)

    def context_rng(self, domain: str, *identifiers: Any) -> random.Random:
        return random.Random(self.derive_seed(domain, *identifiers))

    def get_master_seed_hex(self) -> str:
        return self._master_seed_bytes.hex()
