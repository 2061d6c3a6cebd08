"""Product Catalog API.

Catalog management service that announces product creations to an
asynchronous listener.
"""

__version__ = "0.1.0"
