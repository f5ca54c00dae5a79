"""
HTTP API over aiaio_core.

Consumed by the admin pages of the web app and by the render service
callback.
"""
