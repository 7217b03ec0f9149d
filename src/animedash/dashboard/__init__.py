"""Streamlit surface for the anime dashboard."""
