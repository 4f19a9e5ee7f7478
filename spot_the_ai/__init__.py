"""spot-the-ai: a party game where players try to pick out the LLM's answer."""

__version__ = "0.1.0"
