"""Extract media streams from video and image sites and download them."""

__version__ = "0.1.0"