"""
Numerical solvers: dense linear systems and scalar minimization.
"""
