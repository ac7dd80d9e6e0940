"""
SiteTrack FastAPI backend.
"""
