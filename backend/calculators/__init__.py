"""
Deterministic staircase calculation engine.

Pure Python math. No AI, no network.
Given the measurements from the calculator form, produce priced step
configurations and the round-trip freight surcharge.
"""
