"""Voting services.

Services hold the rating, pairing and ranking logic and are called by routes.
State (catalog, vote counter, random source) is passed in explicitly.
"""
