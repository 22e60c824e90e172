"""Coarse ZIP-code proximity heuristic.

There is no geocoding: distances are random draws from bands chosen by how
much of the ZIP code the user and the resource share.
"""

import random
from typing import Optional

SAME_PREFIX_RANGE = (1, 5)
OTHER_RANGE = (5, 14)


class ZipProximity:
    """Estimates miles between two ZIP codes.

    - identical ZIPs: 0
    - same 3-character prefix: 1 to 5 inclusive
    - anything else (including unknown ZIPs): 5 to 14 inclusive

    Pass a seeded ``random.Random`` for reproducible results.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def estimate(self, user_zip: str, resource_zip: str) -> int:
        if user_zip and user_zip == resource_zip:
            return 0
        if user_zip[:3] and user_zip[:3] == resource_zip[:3]:
            return self.rng.randint(*SAME_PREFIX_RANGE)
        return self.rng.randint(*OTHER_RANGE)
