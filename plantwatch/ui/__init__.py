"""
Dashboard
=========

Plotly figures (charts.py) and the Streamlit app (app.py).
Run with: streamlit run plantwatch/ui/app.py
"""
