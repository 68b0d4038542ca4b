"""
===============================================================================
ERIS SIMULATOR - Dynamics Module
===============================================================================
Physics of the fixed body set.

Submodules:
    body          -- Body entity, semi-implicit Euler step, read-only pose
    astrodynamics -- mu, escape velocity, circular velocity, orbit seeding
    gravity       -- Snapshot-based all-pairs force accumulation, diagnostics
===============================================================================
"""
