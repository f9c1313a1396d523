"""Cognito identity admin API package.

To use the Flask app:
    from cognito_admin.flask_app import create_app

To use the Cognito services without Flask:
    from cognito_admin.core.cognito import CognitoClient, UserService, GroupService

To use the listing engine on its own:
    from cognito_admin.core.listing import PagedListingEngine, PageRequest, SortSpec
"""
# Note: flask_app is not imported here so the core services stay usable
# from scripts without pulling Flask in.
