"""
PlantWatch
==========

Solar-plant monitoring toolkit with:
- Series-string panel health simulation (fault, repair, propagation)
- Per-company plant documents stored as JSON
- Fault reporting and plant summaries
- Command-line and Streamlit interfaces

Architecture:
- engine/: Panel health & series-circuit simulation
- plant/: Plant documents, operations and file store
- reporting.py: pandas fault lists and summaries
- ui/: Plotly charts and Streamlit dashboard
"""

__version__ = "1.0.0"
