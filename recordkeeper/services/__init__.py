"""
High-level use cases for recordkeeper.

Each service module orchestrates repositories to implement the business
rules (natural-key uniqueness, attaching shared records, safe detach).

The console layer should call the registries in ``registry`` instead of
touching repositories directly.
"""
