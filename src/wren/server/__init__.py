"""Request pipeline: dispatch, fallback pages and ASGI plumbing."""
