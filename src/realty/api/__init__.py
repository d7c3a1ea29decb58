"""
FastAPI REST API for the Realty listing marketplace

Provides REST endpoints for the web frontend and admin panel:
- Authentication and user profiles
- Property listings, search and similar listings
- Leads, wishlists, reviews and drafts
- Admin dashboard, analytics, users and site settings
- ImageKit media uploads and location autocomplete
- Health checks
"""
