"""
Frontier Tower captive portal gateway.
"""
