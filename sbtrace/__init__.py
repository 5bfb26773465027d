"""A recursive ray tracer for SBT-raytracer scene files: parsing, shapes, lights, shading and image output."""

__version__ = "0.1.0"