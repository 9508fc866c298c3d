from strawberry.fastapi import GraphQLRouter

from teamflow.config import Settings
from teamflow.gql.context import get_context
from teamflow.gql.schema import schema


def create_graphql_router(settings: Settings) -> GraphQLRouter:
    """GraphQL endpoint; the in-browser IDE is only served in debug mode."""
    return GraphQLRouter(
        schema,
        path="/graphql",
        context_getter=get_context,
        graphql_ide="graphiql" if settings.DEBUG else None,
        tags=["GraphQL"],
    )
