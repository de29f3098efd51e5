"""
Pydantic schema definitions.

Schemas are separated from the SQL in ``services`` so the store and the
HTML layer share one representation of a contact.
"""
