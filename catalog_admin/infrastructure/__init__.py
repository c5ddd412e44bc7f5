"""Infrastructure layer module.

Configuration, persistence, the media host client, security helpers
and logging setup.
"""
