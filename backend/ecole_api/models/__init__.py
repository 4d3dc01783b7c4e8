# Models package init
"""
École API — Domain Models
==========================

What:  In-process shapes that are not API contracts: the caller's identity
       claims and the audit record written to the provider.
Why:   Entities themselves (users, classes, cours) live in the provider and
       are passed through as rows; only these two are built locally.
"""
