"""Site adapters for directory sites."""

from .fitmap import FitMapSite

__all__ = ['FitMapSite']
