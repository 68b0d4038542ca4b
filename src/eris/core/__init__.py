"""
===============================================================================
ERIS SIMULATOR - Core Module
===============================================================================
Constants, immutable simulation configuration and the orientation
quaternion shared by every other module.

Submodules:
    constants  -- Mathematical, physical and default simulation constants
    config     -- SimulationConstants and YAML configuration loading
    quaternion -- Unit quaternion used for body orientation
===============================================================================
"""
