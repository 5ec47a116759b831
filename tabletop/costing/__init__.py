"""
Cost estimation.

Pure math: no I/O. Given measurements, a material catalog entry and the
job's labour rules, produce a CostingSnapshot.
"""
