"""
TEAMFLOW Core API - GraphQL Module

Project and task queries/mutations served at /graphql.
"""

from teamflow.gql.router import create_graphql_router

__all__ = ["create_graphql_router"]
