"""
Operations on curves: fitting and closest-point queries.
"""
