"""
CensoRaca - Visualization Layer.

Kept import-light: matplotlib/seaborn/itables load with each submodule.
"""
