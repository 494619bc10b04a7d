"""
Study Buddy Test Suite
"""
