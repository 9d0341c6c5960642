"""PixelNimbus media upload backend."""
