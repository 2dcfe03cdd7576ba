"""Core Layer: application logic orchestrating the cache.

Contains the console command handler and the services it drives. Depends on
domain interfaces, with concrete implementations injected by main.py.
"""
