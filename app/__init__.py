"""Presentation layer: Streamlit dashboard and the cfar-engine command line."""
