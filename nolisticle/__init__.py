"""nolisticle - spot listicle titles and measure how well that works."""

__version__ = "0.1.0"
