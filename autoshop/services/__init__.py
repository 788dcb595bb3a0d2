"""
Business rules for pricing, costs, technician earnings and scheduling.

Everything in this package works on explicit snapshots of its inputs and
never touches the database.
"""
