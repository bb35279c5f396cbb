"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (settings, logging,
the datastore handle and the document-collection layer). Feature-specific
queries and business rules live in the feature packages (`cars/`, `bids/`).
"""
