"""
Movie suggestions for a group chat.

Responsibilities:
- Read a conversation from the chat store.
- Work out the group's movie taste (LLM with keyword fallback).
- Pick matching now-playing movies from TMDb (local sample list fallback).
"""
