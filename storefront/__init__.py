"""Storefront back-office package initializer.

Ensures the local ``storefront`` package is resolved as a regular package
instead of a namespace package.
"""
