"""Streamlit dashboard for the wealth projector."""
