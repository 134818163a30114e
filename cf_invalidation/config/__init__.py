"""Configuration for the invalidation operator"""
