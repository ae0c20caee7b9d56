from .bots import fallback_decision, random_strategy
from .session import PracticeSession, play_bots

__all__ = ["PracticeSession", "play_bots", "random_strategy", "fallback_decision"]
