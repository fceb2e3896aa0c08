"""HTTP surface for the history insights service."""

from history_insights.api.app import create_app

__all__ = ["create_app"]
