"""
DearSelf - Web application
"""
