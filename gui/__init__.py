"""Presentation layer for the microscopy dashboard.

These modules sit between a front-end (the Streamlit app) and the session
core in `microscopy`. They avoid importing any UI toolkit so they can be
imported in headless test runs.
"""
