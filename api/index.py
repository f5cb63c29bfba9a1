"""
Vercel Serverless Entry Point

This file serves as the bridge between Vercel's serverless runtime and the Flask application.
Vercel looks for this file to bootstrap the backend.

Architecture:
- Vercel calls this file for every request to /api/*
- The adapter builds the Flask app once per execution context with HostedConfig
  (production mode, fallback data, no eager database connection)
- The Flask app handles routing via blueprints in storefront/api/
"""

from storefront.serverless import ServerlessAdapter

# Vercel requires the app to be exported as 'app' or as a handler function
# The name 'app' is detected automatically by @vercel/python
app = ServerlessAdapter()
