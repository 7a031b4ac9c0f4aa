"""
API layer for EventFace.

Exposes HTTP endpoints under /api/v1: media upload and reindexing per
collection, selfie search, stored matches, user media and statistics.
"""
