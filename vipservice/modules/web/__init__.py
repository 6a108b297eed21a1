from .server import WebServer, create_app

__all__ = ['WebServer', 'create_app']
