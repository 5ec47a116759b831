"""
Geometry engine: outline import, boundary generation, measurement.

Pure Python math. Every function here is deterministic and side-effect free.
All boundaries are produced in millimetres, centered at the origin.
"""
