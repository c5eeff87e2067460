"""
DataFlow Analytics UI
Streamlit dashboard over the DataFlow API.
"""
