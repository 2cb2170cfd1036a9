"""
League simulator: double round-robin fixtures, match simulation, league table
and Monte Carlo title predictions.
"""
__version__ = "0.1.0"
