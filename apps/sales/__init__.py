"""
Sales app: cart, cash checkout and the append-only order record.
"""
