"""SparrowTrack attendance engine.

Punch-in/punch-out state machine, work-hour arithmetic and weekly/monthly
reporting over a pluggable record store, with a thin Flask layer on top.
"""
