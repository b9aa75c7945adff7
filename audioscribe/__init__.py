"""
AudioScribe - audio transcription, summarization and live captioning.
"""

__version__ = "0.1.0"
