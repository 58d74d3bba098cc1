"""
MealPrep utility functions
"""
