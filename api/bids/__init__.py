"""
Bids: placement, party-scoped listing and seller status decisions.
"""
