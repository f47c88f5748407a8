"""Domain-level policies and business rules.

This package contains logic that defines *what* the club's rules are
(roles, reminder windows, cookbook visibility, identifiers), independent from
*where* they are applied (services, repositories, storage).
"""
