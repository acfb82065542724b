"""A small ray tracer: primitives, BSP trees, constructive solid geometry, cameras, lights, samplers and noise."""

__version__ = "0.1.0"