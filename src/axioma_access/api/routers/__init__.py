"""
axioma_access.api.routers

HTTP routers: health, dev tokens, access evaluation, profile administration.
"""
