"""
Backend integrations for SiteTrack.
"""

from .api_client import SiteTrackClient, unwrap_list, unwrap_object

__all__ = ['SiteTrackClient', 'unwrap_list', 'unwrap_object']
