"""
Catalog app: product categories and products.
"""
