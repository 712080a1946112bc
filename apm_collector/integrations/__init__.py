"""
Integrações com frameworks web
"""
from .asgi import AsgiRequestProvider, AsgiResponseProvider, CollectorMiddleware

__all__ = ['AsgiRequestProvider', 'AsgiResponseProvider', 'CollectorMiddleware']
