"""
Core editor logic, independent of the widgets.
"""
