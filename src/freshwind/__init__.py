"""freshwind - static file server that reloads the browser when files change."""

__version__ = "0.1.0"
