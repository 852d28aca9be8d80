"""MinutAI: meeting audio to diarized transcript, minutes and PDF."""

__version__ = "0.3.0"
