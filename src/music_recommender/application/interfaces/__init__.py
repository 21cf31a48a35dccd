"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters.
"""

from music_recommender.application.interfaces.completion_client import CompletionClient

__all__ = [
    "CompletionClient",
]
