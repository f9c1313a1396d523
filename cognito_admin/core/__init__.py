"""Core Business Logic Module

This module provides the core logic for Cognito user/group administration,
independent of the HTTP framework.

Module Structure:
    - cognito/              : boto3 cognito-idp client, UserService, GroupService
    - listing.py            : In-memory filter/sort/paginate engine
    - cognito_transformer.py : Cognito ↔ record ↔ JSON transformations
    - validators.py         : Request payload and query validation
    - models.py             : Record and request dataclasses
    - errors.py             : API errors rendered as problem+json

Usage Pattern:
    These modules are NOT auto-imported so the listing engine can be used
    without boto3 installed.

    Import explicitly when needed:
        from cognito_admin.core.listing import PagedListingEngine, PageRequest, SortSpec
        from cognito_admin.core.cognito import UserService, GroupService
        from cognito_admin.core.validators import validate_user_create
"""
