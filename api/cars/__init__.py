"""
Car listings: catalog queries and seller-owned CRUD.
"""
