"""Core domain package for chatpick.

Core contains filtering, selection classification, range expansion and
toggle coordination without any host page or UI code, keeping the selection
logic portable across transcript sources.
"""
