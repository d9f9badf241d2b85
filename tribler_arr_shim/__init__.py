"""
tribler-arr-shim: qBittorrent Web API front-end for a Tribler download engine.
"""
__version__ = "0.2.0"
