"""
===============================================================================
ERIS SIMULATOR - Simulation Module
===============================================================================
Submodules:
    sim_engine -- Two-phase (accumulate, apply) tick driver and telemetry
    scenario   -- Builds constants and bodies from configuration
===============================================================================
"""
