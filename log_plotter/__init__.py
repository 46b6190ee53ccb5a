"""
Proxy log plotter: execution-time trends from REST proxy logs.

Extracts (timestamp, duration) records from semi-structured proxy log lines,
sorts them, optionally averages them over fixed-size windows and renders
the series as a line chart.
"""

__version__ = "0.1.0"
