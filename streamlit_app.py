"""
Anime Dashboard
Entry point for Streamlit Cloud deployment
"""
import sys
import os

# Add the src directory to the Python path
src_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

# Now import the main function
from animedash.dashboard.app import main

if __name__ == "__main__":
    main()
