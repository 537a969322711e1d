"""
Command-line interface for PKSNetwork.
"""
