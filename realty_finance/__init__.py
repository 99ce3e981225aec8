"""
Real estate financing and investment analysis service.
"""
