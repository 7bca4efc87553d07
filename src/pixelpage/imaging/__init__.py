"""Raster image pipeline: codec and pixel transforms."""
