"""
CensoRaca - Application Layer.

Modules:
- race: Load race/color observations and percentages.
- report: Build the HTML report (maps + interactive table).
"""

# Explicitly empty to prevent eager loading.
# Users should use: from censoraca.app.report import generate_report
