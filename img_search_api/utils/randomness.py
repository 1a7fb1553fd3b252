"""Injectable random strategies for human-like pacing and client identity.

Both strategies own a private ``random.Random`` so a seed makes a whole
session reproducible without touching the global RNG.
"""

import random
from typing import Callable, List, Optional, Sequence

DelayStrategy = Callable[[], float]
UserAgentStrategy = Callable[[], str]


class RandomDelay:
    """Uniform delay in seconds between ``minimum`` and ``maximum``."""

    def __init__(self, minimum: float = 1.0, maximum: float = 3.0, seed: Optional[int] = None):
        if minimum < 0 or maximum < minimum:
            raise ValueError(f"Invalid delay range: {minimum}..{maximum}")
        self.minimum = minimum
        self.maximum = maximum
        self._rng = random.Random(seed)

    def __call__(self) -> float:
        return self._rng.uniform(self.minimum, self.maximum)


class RandomUserAgent:
    """Pick a user-agent string at random for each browser session."""

    def __init__(self, user_agents: Sequence[str], seed: Optional[int] = None):
        if not user_agents:
            raise ValueError("At least one user agent is required")
        self.user_agents: List[str] = list(user_agents)
        self._rng = random.Random(seed)

    def __call__(self) -> str:
        return self._rng.choice(self.user_agents)
