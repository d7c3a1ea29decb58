"""
Realty Marketplace - Core Package

This package contains the listing marketplace backend: REST API, persistence
layer, search services and media storage integration.
"""

__version__ = "1.0.0"
