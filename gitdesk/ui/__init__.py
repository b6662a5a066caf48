"""Qt user interface"""
