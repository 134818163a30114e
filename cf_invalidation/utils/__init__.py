"""Utility helpers for the invalidation operator"""
